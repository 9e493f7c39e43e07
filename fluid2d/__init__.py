"""
fluid2d/ — 2D Stable Fluids Solver
===================================
Exports the main interfaces the front ends use.

main.py, visualizer.py and exporter.py import: FluidSimulation
Tests and power users also reach the individual operators below.
"""

from .advect import advect
from .boundary import apply_boundary
from .diffuse import diffuse
from .grid import FieldKind, FluidGrid, GridConstructionError
from .simulation import FluidSample, FluidSimulation
from .solver import project, relax

__all__ = [
    "FieldKind", "FluidGrid", "GridConstructionError",
    "FluidSample", "FluidSimulation",
    "apply_boundary", "relax", "project", "diffuse", "advect",
]
