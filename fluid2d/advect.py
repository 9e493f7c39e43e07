"""
advect.py — Semi-Lagrangian Advection
======================================
This is what makes fluid look like it's *actually flowing*.

The algorithm (per interior cell):
  1. Look at the current cell center position.
  2. Trace BACKWARD along the velocity field by one timestep (dt).
     → "Where did the stuff in this cell come FROM?"
  3. Clamp that point so it stays inside the sampleable area.
  4. Sample the source field there with bilinear interpolation
     (it'll land between grid cells).
  5. That sampled value becomes the new value for this cell.

Unconditionally stable for any dt (no CFL limit), at the cost of smearing.

Key reference: Jos Stam, "Stable Fluids" (SIGGRAPH 1999)
"""

import numpy as np

from .boundary import apply_boundary
from .grid import FieldKind, FluidGrid


def _bilinear_interpolate(field: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Bilinear interpolation of a 2D field at arbitrary positions.

    Callers clamp x, y beforehand so that floor(x)+1 and floor(y)+1 are
    still valid indices.

    Args:
        field : 2D numpy array to sample from
        x, y  : Query positions (same shape, can be fractional)

    Returns:
        Interpolated values, same shape as x/y
    """
    i0 = np.floor(x).astype(np.intp)
    j0 = np.floor(y).astype(np.intp)
    i1 = i0 + 1
    j1 = j0 + 1

    s1 = x - i0
    s0 = 1.0 - s1
    t1 = y - j0
    t0 = 1.0 - t1

    return (s0 * (t0 * field[i0, j0] + t1 * field[i0, j1]) +
            s1 * (t0 * field[i1, j0] + t1 * field[i1, j1]))


def advect(grid: FluidGrid, kind: FieldKind, d: np.ndarray, d0: np.ndarray,
           vel_x: np.ndarray, vel_y: np.ndarray):
    """
    Carry d0 along (vel_x, vel_y) for one timestep and write the result into d.

    d must not alias d0, vel_x or vel_y; the whole interior is read
    before anything is written.

    Args:
        grid  : FluidGrid providing dt and dimensions
        kind  : FieldKind of the advected quantity (selects the boundary rule)
        d     : Output buffer, (W+2, H+2)
        d0    : Field to sample from
        vel_x : x-velocity to trace along
        vel_y : y-velocity to trace along
    """
    W, H = grid.width, grid.height

    # Grid-unit velocity → cell displacement over one step
    dtx = grid.dt * (W - 2)
    dty = grid.dt * (H - 2)

    i, j = np.meshgrid(
        np.arange(1, W + 1, dtype=np.float64),
        np.arange(1, H + 1, dtype=np.float64),
        indexing="ij",
    )

    # Back-trace: where did the fluid in cell (i, j) come FROM?
    x = np.clip(i - dtx * vel_x[1:-1, 1:-1], 0.5, W + 0.5)
    y = np.clip(j - dty * vel_y[1:-1, 1:-1], 0.5, H + 0.5)

    d[1:-1, 1:-1] = _bilinear_interpolate(d0, x, y)
    apply_boundary(kind, d)
