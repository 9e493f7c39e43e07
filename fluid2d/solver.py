"""
solver.py — Gauss-Seidel Relaxation and Pressure Projection
============================================================
The pressure projection step enforces INCOMPRESSIBILITY:
  div(v) = 0 everywhere

After diffusion and after advection the velocity field is generally NOT
divergence-free (fluid "piles up" in some cells). We fix this by:
  1. Computing divergence of the current velocity field
  2. Solving the Poisson equation for pressure: ∇²p = div(v)
  3. Subtracting the pressure gradient from velocity: v = v - ∇p

Both the Poisson solve and implicit diffusion share one linear solver,
`relax`, a fixed-count Gauss-Seidel iteration.

Gauss-Seidel reads neighbours that were ALREADY updated earlier in the
same sweep. That makes it a sequential loop, which numpy slicing cannot
express, so the sweep itself is compiled with numba.
"""

import numpy as np
from numba import njit

from .boundary import apply_boundary
from .grid import FieldKind, FluidGrid


@njit
def _gauss_seidel_sweep(x, x0, a, c_recip):
    """One in-place sweep over the interior: j outer, i inner, low to high."""
    nx = x.shape[0] - 1
    ny = x.shape[1] - 1
    for j in range(1, ny):
        for i in range(1, nx):
            x[i, j] = (x0[i, j] + a * (x[i + 1, j] + x[i - 1, j] +
                                       x[i, j + 1] + x[i, j - 1])) * c_recip


def relax(kind: FieldKind, x: np.ndarray, x0: np.ndarray,
          a: float, c: float, iterations: int):
    """
    Solve  x = (x0 + a * Σ(4 neighbours of x)) / c  in place.

    Always runs exactly `iterations` sweeps (no convergence test) and
    refills the halo of `x` after every sweep.

    Args:
        kind       : FieldKind of x (selects the boundary rule)
        x          : Unknown, (W+2, H+2). Its current content is the initial guess.
        x0         : Right-hand side, same shape
        a, c       : System coefficients
        iterations : Number of sweeps (>= 1)
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")
    c_recip = 1.0 / c
    for _ in range(iterations):
        _gauss_seidel_sweep(x, x0, float(a), c_recip)
        apply_boundary(kind, x)


def project(grid: FluidGrid, vel_x: np.ndarray, vel_y: np.ndarray,
            pressure: np.ndarray, divergence: np.ndarray, iterations: int = None):
    """
    Pressure projection: make (vel_x, vel_y) divergence-free in place.

    `pressure` and `divergence` are scratch buffers; their content on
    entry is ignored and on exit is the solved potential / the
    right-hand side that produced it.

    Args:
        grid       : FluidGrid providing dimensions and default iteration count
        vel_x      : x-velocity, modified in place
        vel_y      : y-velocity, modified in place
        pressure   : scratch buffer for the potential
        divergence : scratch buffer for the divergence
        iterations : Gauss-Seidel sweeps (default: grid.iterations)
    """
    if iterations is None:
        iterations = grid.iterations
    N = grid.resolution

    # Step 1: divergence (scaled by -1/N) and a zero initial guess
    divergence[1:-1, 1:-1] = -0.5 * (
        (vel_x[2:, 1:-1] - vel_x[:-2, 1:-1]) +
        (vel_y[1:-1, 2:] - vel_y[1:-1, :-2])
    ) / N
    pressure[1:-1, 1:-1] = 0.0

    apply_boundary(FieldKind.SCALAR, divergence)
    apply_boundary(FieldKind.SCALAR, pressure)

    # Step 2: Poisson solve
    relax(FieldKind.SCALAR, pressure, divergence, 1.0, 4.0, iterations)

    # Step 3: subtract the gradient
    vel_x[1:-1, 1:-1] -= 0.5 * N * (pressure[2:, 1:-1] - pressure[:-2, 1:-1])
    vel_y[1:-1, 1:-1] -= 0.5 * N * (pressure[1:-1, 2:] - pressure[1:-1, :-2])

    apply_boundary(FieldKind.VELOCITY_X, vel_x)
    apply_boundary(FieldKind.VELOCITY_Y, vel_y)
