"""
diffuse.py — Implicit Diffusion
================================
Diffusion makes fluids spread out over time.
  - High diffusion  → density spreads fast (watercolor bleed)
  - Low diffusion   → density stays tight
  - High viscosity  → thick fluid (honey)
  - Low viscosity   → thin fluid (air, water)

The math: We need to solve the implicit heat equation:
  (I - a·∇²) x_new = x_old

where a = rate * dt * (W-2) * (H-2)

Why implicit? Because explicit diffusion (just adding the Laplacian each step)
is only stable when dt is tiny. Implicit diffusion is unconditionally stable —
you can use large dt and the simulation won't blow up.

The system is handed to the Gauss-Seidel solver in solver.py with
c = 1 + 4a (four neighbours in 2D). Same convention for velocity and density.
"""

import numpy as np

from .grid import FieldKind, FluidGrid
from .solver import relax


def diffusion_coefficients(grid: FluidGrid, rate: float) -> tuple:
    """Return (a, c) of the implicit diffusion system for this grid and rate."""
    a = grid.dt * rate * (grid.width - 2) * (grid.height - 2)
    return a, 1.0 + 4.0 * a


def diffuse(grid: FluidGrid, kind: FieldKind, x: np.ndarray, x0: np.ndarray, rate: float):
    """
    Diffuse x0 into x.

    x is seeded with x0 before relaxing, so nothing left over in x from a
    previous tick leaks into the result.

    Args:
        grid : FluidGrid providing dt, dimensions and iteration count
        kind : FieldKind of the data (selects the boundary rule)
        x    : Output buffer, (W+2, H+2)
        x0   : Source field, same shape
        rate : viscosity (velocity) or diffusion (density)
    """
    a, c = diffusion_coefficients(grid, rate)
    np.copyto(x, x0)
    relax(kind, x, x0, a, c, grid.iterations)
