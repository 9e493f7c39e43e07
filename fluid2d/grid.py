"""
grid.py — Collocated 2D Grid with a One-Cell Halo
==================================================
The foundation of the entire simulation.

Layout:
  - Every field (u, v, density and their "prev" twins) lives at CELL
    CENTERS and has shape (W+2, H+2).
  - Interior cells are 1..W along x and 1..H along y.
  - Index 0 and W+1 (resp. H+1) form the HALO ring. Only the boundary
    policy writes there; injections always land in the interior.

Indexing is field[i, j] with i along x (width) and j along y (height).
"""

import enum
import logging

import numpy as np

logger = logging.getLogger(__name__)


class FieldKind(enum.Enum):
    """What a field represents. Decides how the halo is filled, not storage."""
    SCALAR = "scalar"
    VELOCITY_X = "velocity_x"
    VELOCITY_Y = "velocity_y"


class GridConstructionError(ValueError):
    """Raised when a grid cannot be built from the given dimensions/parameters."""


class FluidGrid:
    """
    W×H grid storing all simulation state.
    This is the single source of truth passed between all physics steps.
    """

    def __init__(self, width: int, height: int, viscosity: float = 0.0001,
                 diffusion: float = 0.0001, dt: float = 0.1, iterations: int = 20):
        """
        Args:
            width, height : Interior cell counts (must both be > 2)
            viscosity     : Momentum diffusion rate (0 = inviscid)
            diffusion     : Density diffusion rate (0 = no spreading)
            dt            : Timestep
            iterations    : Gauss-Seidel sweeps per relaxation solve
        """
        if width <= 2 or height <= 2:
            raise GridConstructionError(
                f"Grid must be larger than 2x2 interior cells, got {width}x{height}")
        if viscosity < 0 or diffusion < 0:
            raise GridConstructionError(
                f"viscosity and diffusion must be >= 0, got {viscosity}, {diffusion}")
        if dt <= 0:
            raise GridConstructionError(f"dt must be > 0, got {dt}")
        if iterations < 1:
            raise GridConstructionError(f"iterations must be >= 1, got {iterations}")

        self._width = int(width)
        self._height = int(height)

        # Mutable between ticks
        self.viscosity = viscosity
        self.diffusion = diffusion
        self.dt = dt
        self.iterations = int(iterations)

        shape = (self._width + 2, self._height + 2)

        # ── Velocity ───────────────────────────────────────────────────────
        self.u = np.zeros(shape, dtype=np.float64)
        self.v = np.zeros(shape, dtype=np.float64)
        self.u_prev = np.zeros(shape, dtype=np.float64)
        self.v_prev = np.zeros(shape, dtype=np.float64)

        # ── Scalar dye ─────────────────────────────────────────────────────
        self.density = np.zeros(shape, dtype=np.float64)
        self.density_prev = np.zeros(shape, dtype=np.float64)

        logger.debug("FluidGrid %dx%d visc=%g diff=%g dt=%g iter=%d",
                     self._width, self._height, viscosity, diffusion, dt, self.iterations)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> tuple:
        """Storage shape including the halo."""
        return self._width + 2, self._height + 2

    @property
    def resolution(self) -> int:
        """Characteristic resolution N used by the projection step."""
        return max(self._width, self._height)

    def fields(self) -> list:
        return [self.u, self.v, self.u_prev, self.v_prev,
                self.density, self.density_prev]

    def in_storage(self, i: int, j: int) -> bool:
        return 0 <= i < self._width + 2 and 0 <= j < self._height + 2

    def get(self, field: np.ndarray, i: int, j: int) -> float:
        """Read one cell. Anything outside the storage (halo included) reads 0.0."""
        if not self.in_storage(i, j):
            return 0.0
        return float(field[i, j])

    def set(self, field: np.ndarray, i: int, j: int, value: float):
        field[i, j] = value

    def add(self, field: np.ndarray, i: int, j: int, value: float):
        field[i, j] += value

    def clamp_to_interior(self, x, y) -> tuple:
        """Map arbitrary coordinates onto the nearest interior cell."""
        i = min(max(int(x), 1), self._width)
        j = min(max(int(y), 1), self._height)
        return i, j

    def compute_divergence(self) -> np.ndarray:
        """
        Central-difference divergence of (u, v) at every interior cell.

            div[i,j] = 0.5 * ((u[i+1,j] - u[i-1,j]) + (v[i,j+1] - v[i,j-1]))

        In grid-index units. Returns shape (W, H).
        """
        return 0.5 * (
            (self.u[2:, 1:-1] - self.u[:-2, 1:-1]) +
            (self.v[1:-1, 2:] - self.v[1:-1, :-2])
        )

    def save_state(self) -> dict:
        """Snapshot the current buffers as independent numpy arrays."""
        return {
            "velocity_x": self.u.copy(),
            "velocity_y": self.v.copy(),
            "density":    self.density.copy(),
        }

    def reset(self):
        """Zero out all fields."""
        for arr in self.fields():
            arr[:] = 0.0

    def __repr__(self):
        max_div = np.abs(self.compute_divergence()).max()
        max_vel = max(np.abs(self.u).max(), np.abs(self.v).max())
        return (
            f"FluidGrid({self._width}x{self._height}, dt={self.dt})\n"
            f"  density  : max={self.density.max():.4f}, sum={self.density.sum():.2f}\n"
            f"  velocity : max_component={max_vel:.4f}\n"
            f"  divergence: max={max_div:.6f} (target: ~0)"
        )
