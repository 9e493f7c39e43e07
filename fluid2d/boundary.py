"""
boundary.py — Solid-Wall Boundary Conditions
=============================================
Fills the one-cell halo around a field from its interior.

  - The velocity component NORMAL to a wall is mirrored with a sign flip
    (u at the left/right walls, v at the bottom/top walls). The halo then
    cancels the interior value on the wall face → no penetration.
  - Everything else is copied straight across: tangential velocity slips
    freely, scalars get a zero-gradient (Neumann) edge.
  - Each corner is the average of its two halo neighbours.

Without this, fluid leaks out of the array → simulation explodes.
"""

import numpy as np

from .grid import FieldKind

# Which kinds flip sign on which pair of walls: (left/right, bottom/top)
_REFLECTION = {
    FieldKind.SCALAR:     (1.0, 1.0),
    FieldKind.VELOCITY_X: (-1.0, 1.0),
    FieldKind.VELOCITY_Y: (1.0, -1.0),
}


def apply_boundary(kind: FieldKind, field: np.ndarray):
    """
    Overwrite the halo ring of `field` in place.

    Args:
        kind  : FieldKind of the data in `field`
        field : (W+2, H+2) array
    """
    try:
        sign_x, sign_y = _REFLECTION[kind]
    except KeyError:
        raise ValueError(f"Unknown field kind: {kind!r}") from None

    # ── Left / right walls (x = 0, x = W+1) ───────────────────────────────
    field[0,  1:-1] = sign_x * field[1,  1:-1]
    field[-1, 1:-1] = sign_x * field[-2, 1:-1]

    # ── Bottom / top walls (y = 0, y = H+1) ───────────────────────────────
    field[1:-1, 0]  = sign_y * field[1:-1, 1]
    field[1:-1, -1] = sign_y * field[1:-1, -2]

    # ── Corners ───────────────────────────────────────────────────────────
    field[0,  0]  = 0.5 * (field[1,  0]  + field[0,  1])
    field[0,  -1] = 0.5 * (field[1,  -1] + field[0,  -2])
    field[-1, 0]  = 0.5 * (field[-2, 0]  + field[-1, 1])
    field[-1, -1] = 0.5 * (field[-2, -1] + field[-1, -2])
