"""
sources.py — Density and Velocity Emitters
===========================================
Convenience injectors used by the demos, the CLI and the live viewer.

Everything here goes through FluidSimulation.add_density / add_velocity,
so coordinates are clamped into the interior and the halo is never
touched. Randomness (random splats) is drawn from a caller-supplied
numpy Generator and never reaches the solver itself.
"""

import math

import numpy as np


def add_density_blob(sim, cx: int, cy: int, radius: int = 3, amount: float = 100.0):
    """
    Inject `amount` into every cell of the (2*radius+1)² square around (cx, cy).
    """
    for i in range(-radius, radius + 1):
        for j in range(-radius, radius + 1):
            sim.add_density(cx + i, cy + j, amount)


def add_swirl(sim, cx: int, cy: int, radius: float = 15.0, strength: float = 0.1):
    """
    Add a counter-clockwise circular velocity field around (cx, cy).

    Each cell with 0 < dist < radius receives (-dy * strength, dx * strength).

    Args:
        cx, cy   : Swirl center (cell indices)
        radius   : Influence radius in cells
        strength : Angular speed factor
    """
    for i in range(1, sim.width + 1):
        for j in range(1, sim.height + 1):
            dx = i - cx
            dy = j - cy
            dist = math.hypot(dx, dy)
            if 0 < dist < radius:
                sim.add_velocity(i, j, -dy * strength, dx * strength)


def add_oscillating_jet(sim, frame: int, cx: int, cy: int, radius: int = 5,
                        density: float = 50.0, speed: float = 20.0):
    """
    Rotating jet: dye plus a velocity whose direction turns with `frame`.

    Velocity added per cell: (speed * sin(0.1 * frame), speed * cos(0.1 * frame)).
    """
    du = speed * math.sin(frame * 0.1)
    dv = speed * math.cos(frame * 0.1)
    for i in range(-radius, radius + 1):
        for j in range(-radius, radius + 1):
            sim.add_density(cx + i, cy + j, density)
            sim.add_velocity(cx + i, cy + j, du, dv)


def add_random_splat(sim, x: int, y: int, amount: float = 100.0, speed: float = 5.0,
                     rng: np.random.Generator = None) -> tuple:
    """
    Drop dye at (x, y) and push it in a random direction.

    Returns:
        (dx, dy) : the velocity impulse that was applied
    """
    if rng is None:
        rng = np.random.default_rng()
    angle = rng.uniform(0.0, 2.0 * math.pi)
    dx = speed * math.cos(angle)
    dy = speed * math.sin(angle)
    sim.add_density(x, y, amount)
    sim.add_velocity(x, y, dx, dy)
    return dx, dy
