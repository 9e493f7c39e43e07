import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest

from fluid2d import FluidGrid, FluidSimulation


@pytest.fixture
def grid():
    return FluidGrid(10, 10, viscosity=0.0001, diffusion=0.0001, dt=0.1)


@pytest.fixture
def sim():
    return FluidSimulation(10, 10, viscosity=0.0001, diffusion=0.0001, dt=0.1)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
