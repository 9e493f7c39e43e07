"""
visualizer.py — Interactive Density Viewer
===========================================
Renders the 2D density field with matplotlib and lets you stir it:
  - Left-drag        → inject dye, push fluid along the drag direction
  - Right-click      → random splat (dye + impulse in a random direction)
  - Sliders          → viscosity / diffusion, applied between ticks

Uses matplotlib FuncAnimation for real-time updates.
"""

from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.widgets import Slider

from fluid2d.sources import add_random_splat

# Custom smoke colormap: black → orange → white
SMOKE_COLORS = ["#000000", "#1a0a00", "#ff6a00", "#ffffff"]
smoke_cmap = LinearSegmentedColormap.from_list("smoke", SMOKE_COLORS)


class FluidVisualizer:
    """
    Real-time viewer of the fluid simulation.

    Usage (standalone):
        from fluid2d import FluidSimulation
        from visualizer import FluidVisualizer

        sim = FluidSimulation(64, 64)
        viz = FluidVisualizer(sim)
        viz.run()  # Opens live window
    """

    def __init__(self, simulation, dye_amount: float = 50.0, drag_gain: float = 0.5,
                 vmax: float = 5.0, seed: int = None):
        """
        Args:
            simulation : FluidSimulation instance
            dye_amount : Density added per mouse event
            drag_gain  : Velocity added per cell of mouse drag
            vmax       : Density mapped to the brightest color
            seed       : Seed for right-click random splats
        """
        self.sim = simulation
        self.dye_amount = dye_amount
        self.drag_gain = drag_gain
        self.vmax = vmax
        self.rng = np.random.default_rng(seed)
        self._last_mouse = None
        self._pending = []   # injections queued by mouse callbacks

        self._setup_figure()

    def _setup_figure(self):
        """Initialize the figure: one image plus two parameter sliders."""
        self.fig, self.ax = plt.subplots(figsize=(7, 7.8))
        self.fig.patch.set_facecolor('#0a0a0a')
        self.fig.subplots_adjust(bottom=0.18)

        self.ax.set_facecolor('#0a0a0a')
        self.ax.set_xticks([])
        self.ax.set_yticks([])
        for spine in self.ax.spines.values():
            spine.set_edgecolor('#333333')

        self.img = self.ax.imshow(
            self._density_image(), cmap=smoke_cmap,
            vmin=0, vmax=self.vmax,
            interpolation='bilinear',
            origin='lower',
            aspect='equal',
            extent=(0.5, self.sim.width + 0.5, 0.5, self.sim.height + 0.5),
        )

        self.title_text = self.ax.set_title(
            "Fluid Sim — Frame 0 | 0.0 FPS",
            color='#cccccc', fontsize=10, fontfamily='monospace'
        )

        g = self.sim.grid
        ax_visc = self.fig.add_axes([0.2, 0.08, 0.6, 0.03])
        ax_diff = self.fig.add_axes([0.2, 0.03, 0.6, 0.03])
        self.visc_slider = Slider(ax_visc, "viscosity", 0.0, 0.001, valinit=g.viscosity)
        self.diff_slider = Slider(ax_diff, "diffusion", 0.0, 0.001, valinit=g.diffusion)
        self.visc_slider.on_changed(lambda val: self.sim.set_parameters(viscosity=val))
        self.diff_slider.on_changed(lambda val: self.sim.set_parameters(diffusion=val))

        self.fig.canvas.mpl_connect("button_press_event", self._on_press)
        self.fig.canvas.mpl_connect("motion_notify_event", self._on_motion)
        self.fig.canvas.mpl_connect("button_release_event", self._on_release)

    def _density_image(self) -> np.ndarray:
        """Interior density, transposed so X is horizontal."""
        return self.sim.grid.density[1:-1, 1:-1].T

    # ── Mouse handling ────────────────────────────────────────────────────
    # Callbacks only queue work; injections are applied between ticks in update().

    def _on_press(self, event):
        if event.inaxes is not self.ax or event.xdata is None:
            return
        cell = (int(round(event.xdata)), int(round(event.ydata)))
        if event.button == 3:
            self._pending.append(("splat", cell, None))
        else:
            self._last_mouse = cell
            self._pending.append(("dye", cell, (0.0, 0.0)))

    def _on_motion(self, event):
        if self._last_mouse is None or event.inaxes is not self.ax or event.xdata is None:
            return
        cell = (int(round(event.xdata)), int(round(event.ydata)))
        dx = (cell[0] - self._last_mouse[0]) * self.drag_gain
        dy = (cell[1] - self._last_mouse[1]) * self.drag_gain
        self._pending.append(("dye", cell, (dx, dy)))
        self._last_mouse = cell

    def _on_release(self, event):
        self._last_mouse = None

    def _apply_pending(self):
        for action, (x, y), impulse in self._pending:
            if action == "splat":
                add_random_splat(self.sim, x, y, amount=self.dye_amount, rng=self.rng)
            else:
                self.sim.add_density(x, y, self.dye_amount)
                self.sim.add_velocity(x, y, *impulse)
        self._pending.clear()

    # ── Animation ─────────────────────────────────────────────────────────

    def update(self, frame_num):
        """Called by FuncAnimation each frame. Steps sim and updates the image."""
        self._apply_pending()
        self.sim.step()

        self.img.set_data(self._density_image())
        metrics = self.sim.last_metrics
        self.title_text.set_text(
            f"Fluid Sim — Frame {metrics['frame']} | "
            f"{metrics['fps']:.1f} FPS | "
            f"div_max={metrics['divergence_max']:.5f}"
        )
        return [self.img, self.title_text]

    def run(self, fps: int = 30, frames: int = None):
        """
        Start the live animation window.

        Args:
            fps    : Target animation frame rate
            frames : Total frames to render (None = infinite)
        """
        interval_ms = 1000 // fps
        self.anim = animation.FuncAnimation(
            self.fig,
            self.update,
            frames=frames,
            interval=interval_ms,
            blit=False,
            cache_frame_data=False,
        )
        plt.show()

    def save_gif(self, path, fps: int = 10, frames: int = 100) -> Path:
        """
        Step the simulation `frames` times and write every frame to a GIF
        instead of opening a window. Pending mouse injections still apply.
        """
        path = Path(path)
        self.anim = animation.FuncAnimation(
            self.fig, self.update, frames=frames,
            interval=1000 // fps, blit=False, repeat=False,
        )
        self.anim.save(path, writer=animation.PillowWriter(fps=fps))
        plt.close(self.fig)
        return path
