"""
simulation.py — Master Physics Loop
====================================
The complete simulation step that ties everything together.
One call to `step()` advances the fluid by dt.

Physics pipeline per frame (external forces are injected beforehand
through add_density / add_velocity):
  1. Diffuse velocity (viscosity)          u, v      → u_prev, v_prev
  2. Project velocity (enforce incompressibility)
  3. Advect velocity (self-advection)      u_prev, v_prev → u, v
  4. Project again (clean up after advection)
  5. Diffuse density (smoke spreading)     density   → density_prev
  6. Advect density (smoke movement)       density_prev → density

This follows the "Stable Fluids" paper by Jos Stam. The order matters:
projection must always follow anything that can add divergence.
"""

import logging
import math
import time
from typing import NamedTuple

import numpy as np

from .advect import advect
from .diffuse import diffuse
from .grid import FieldKind, FluidGrid
from .solver import project

logger = logging.getLogger(__name__)

DEFAULT_DT = 0.1
DEFAULT_VISCOSITY = 0.0001
DEFAULT_DIFFUSION = 0.0001
DEFAULT_ITERATIONS = 20


class FluidSample(NamedTuple):
    density: float
    velocity_x: float
    velocity_y: float


_ZERO_SAMPLE = FluidSample(0.0, 0.0, 0.0)


class FluidSimulation:
    """
    The complete 2D fluid simulation.

    Usage:
        sim = FluidSimulation(64, 64)
        sim.add_density(32, 32, 100.0)
        sim.add_velocity(32, 32, 1.0, 0.0)
        for frame in range(100):
            sim.step()
            reading = sim.query(32, 32)
    """

    def __init__(self, width: int, height: int,
                 viscosity: float = DEFAULT_VISCOSITY,
                 diffusion: float = DEFAULT_DIFFUSION,
                 dt: float = DEFAULT_DT,
                 iterations: int = DEFAULT_ITERATIONS):
        """
        Args:
            width, height : Interior grid size (both > 2)
            viscosity     : Fluid thickness (keep very small for air-like smoke)
            diffusion     : Smoke spreading rate (keep small for clean smoke)
            dt            : Timestep
            iterations    : Gauss-Seidel sweeps per solve.
                            10 = fast/rough, 20 = balanced, 80+ = accurate

        Raises:
            GridConstructionError: on invalid dimensions or parameters
        """
        self.grid = FluidGrid(width, height, viscosity=viscosity,
                              diffusion=diffusion, dt=dt, iterations=iterations)
        self.frame = 0
        self.last_metrics = None
        self.perf_log = []   # stores timing data per frame

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def set_parameters(self, viscosity: float = None, diffusion: float = None,
                       dt: float = None, iterations: int = None):
        """
        Change solver parameters between ticks (e.g. from UI sliders).
        Arguments left as None keep their current value.
        """
        g = self.grid
        if viscosity is not None:
            if viscosity < 0:
                raise ValueError(f"viscosity must be >= 0, got {viscosity}")
            g.viscosity = viscosity
        if diffusion is not None:
            if diffusion < 0:
                raise ValueError(f"diffusion must be >= 0, got {diffusion}")
            g.diffusion = diffusion
        if dt is not None:
            if dt <= 0:
                raise ValueError(f"dt must be > 0, got {dt}")
            g.dt = dt
        if iterations is not None:
            if iterations < 1:
                raise ValueError(f"iterations must be >= 1, got {iterations}")
            g.iterations = int(iterations)
        logger.info("Parameters: visc=%g diff=%g dt=%g iter=%d",
                    g.viscosity, g.diffusion, g.dt, g.iterations)

    # ── Injection ──────────────────────────────────────────────────────────

    def add_density(self, x, y, amount: float):
        """Accumulate `amount` of dye at (x, y), clamped into the interior."""
        i, j = self.grid.clamp_to_interior(x, y)
        self.grid.add(self.grid.density, i, j, amount)

    def add_velocity(self, x, y, dx: float, dy: float):
        """Accumulate a velocity impulse at (x, y), clamped into the interior."""
        g = self.grid
        i, j = g.clamp_to_interior(x, y)
        g.add(g.u, i, j, dx)
        g.add(g.v, i, j, dy)

    def fade_density(self, fraction: float):
        """Multiply every density cell by (1 - fraction)."""
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"fraction must be within [0, 1], got {fraction}")
        self.grid.density *= (1.0 - fraction)

    # ── Query ──────────────────────────────────────────────────────────────

    def query(self, x: int, y: int) -> FluidSample:
        """
        Read (density, velocity_x, velocity_y) at storage cell (x, y).
        Coordinates outside [0, width) × [0, height) read as all zeros.
        """
        x, y = math.floor(x), math.floor(y)
        if not (0 <= x < self.width and 0 <= y < self.height):
            return _ZERO_SAMPLE
        g = self.grid
        return FluidSample(g.get(g.density, x, y),
                           g.get(g.u, x, y),
                           g.get(g.v, x, y))

    # ── Time stepping ──────────────────────────────────────────────────────

    def step(self):
        """
        Advance simulation by one timestep (dt).

        The previous-step buffers are used as scratch space and hold
        nothing meaningful afterwards. Timings land in `last_metrics`.
        """
        t_total_start = time.perf_counter()
        g = self.grid

        # ── Step 1: Diffuse velocity (viscosity) ───────────────────────────
        t0 = time.perf_counter()
        diffuse(g, FieldKind.VELOCITY_X, g.u_prev, g.u, g.viscosity)
        diffuse(g, FieldKind.VELOCITY_Y, g.v_prev, g.v, g.viscosity)
        t_diffuse_vel = (time.perf_counter() - t0) * 1000

        # ── Step 2: Project velocity (u, v are free as scratch here) ───────
        t0 = time.perf_counter()
        project(g, g.u_prev, g.v_prev, g.u, g.v)
        t_project1 = (time.perf_counter() - t0) * 1000

        # ── Step 3: Advect velocity (self-advection) ───────────────────────
        t0 = time.perf_counter()
        advect(g, FieldKind.VELOCITY_X, g.u, g.u_prev, g.u_prev, g.v_prev)
        advect(g, FieldKind.VELOCITY_Y, g.v, g.v_prev, g.u_prev, g.v_prev)
        t_advect_vel = (time.perf_counter() - t0) * 1000

        # ── Step 4: Project again (clean up post-advection divergence) ─────
        t0 = time.perf_counter()
        project(g, g.u, g.v, g.u_prev, g.v_prev)
        t_project2 = (time.perf_counter() - t0) * 1000

        # ── Step 5: Diffuse density (smoke spreading) ──────────────────────
        t0 = time.perf_counter()
        diffuse(g, FieldKind.SCALAR, g.density_prev, g.density, g.diffusion)
        t_diffuse_den = (time.perf_counter() - t0) * 1000

        # ── Step 6: Advect density (smoke movement) ────────────────────────
        t0 = time.perf_counter()
        advect(g, FieldKind.SCALAR, g.density, g.density_prev, g.u, g.v)
        t_advect_den = (time.perf_counter() - t0) * 1000

        # ── Frame bookkeeping ──────────────────────────────────────────────
        self.frame += 1
        t_total = (time.perf_counter() - t_total_start) * 1000

        metrics = {
            "frame"          : self.frame,
            "total_ms"       : t_total,
            "fps"            : 1000.0 / t_total if t_total > 0 else 0,
            "diffuse_vel_ms" : t_diffuse_vel,
            "project1_ms"    : t_project1,
            "advect_vel_ms"  : t_advect_vel,
            "project2_ms"    : t_project2,
            "diffuse_den_ms" : t_diffuse_den,
            "advect_den_ms"  : t_advect_den,
            "divergence_max" : float(np.abs(g.compute_divergence()).max()),
            "density_total"  : float(g.density.sum()),
        }
        self.last_metrics = metrics
        self.perf_log.append(metrics)
        logger.debug("frame %d: %.2fms (project %.2f+%.2fms) div_max=%.6f",
                     self.frame, t_total, t_project1, t_project2,
                     metrics["divergence_max"])

    # ── Diagnostics ────────────────────────────────────────────────────────

    def is_finite(self) -> bool:
        """True when no field holds NaN or Inf."""
        return all(np.isfinite(arr).all() for arr in self.grid.fields())

    def statistics(self) -> dict:
        """Density and speed summary over the queryable window [0,W)×[0,H)."""
        g = self.grid
        d = g.density[:self.width, :self.height]
        speed = np.hypot(g.u[:self.width, :self.height],
                         g.v[:self.width, :self.height])
        n_cells = self.width * self.height
        return {
            "total_density"   : float(d.sum()),
            "average_density" : float(d.sum() / n_cells),
            "max_density"     : float(d.max()),
            "average_velocity": float(speed.sum() / n_cells),
            "max_velocity"    : float(speed.max()),
        }

    def get_snapshot(self) -> dict:
        """Capture the current state for export (see exporter.SnapshotRecorder)."""
        snapshot = self.grid.save_state()
        snapshot["frame"] = self.frame
        snapshot["divergence"] = self.grid.compute_divergence()
        return snapshot

    def reset(self):
        self.grid.reset()
        self.frame = 0
        self.last_metrics = None
        self.perf_log = []

    def print_status(self):
        """Pretty-print current simulation state."""
        g = self.grid
        div = g.compute_divergence()
        print(f"\n{'='*50}")
        print(f"  Frame: {self.frame}  |  Grid: {self.width}x{self.height}")
        print(f"  Density   : max={g.density.max():.4f}, total={g.density.sum():.2f}")
        print(f"  Velocity  : max_u={np.abs(g.u).max():.4f}, max_v={np.abs(g.v).max():.4f}")
        print(f"  Divergence: max={np.abs(div).max():.6f}, mean={np.abs(div).mean():.8f}")
        if self.last_metrics:
            last = self.last_metrics
            print(f"  Perf      : {last['total_ms']:.1f}ms/frame ({last['fps']:.1f} FPS)")
        print(f"{'='*50}")
