import numpy as np
import pytest

from fluid2d import FieldKind, FluidGrid, diffuse
from fluid2d.diffuse import diffusion_coefficients


def test_coefficients():
    g = FluidGrid(10, 12, dt=0.1)
    a, c = diffusion_coefficients(g, 0.01)
    assert a == pytest.approx(0.1 * 0.01 * 8 * 10)
    assert c == pytest.approx(1 + 4 * a)


def test_zero_rate_is_identity(rng):
    g = FluidGrid(8, 8)
    x0 = rng.normal(size=g.shape)
    x = np.zeros(g.shape)
    diffuse(g, FieldKind.SCALAR, x, x0, 0.0)
    np.testing.assert_array_equal(x[1:-1, 1:-1], x0[1:-1, 1:-1])


def test_spreads_a_peak_and_keeps_the_total():
    g = FluidGrid(10, 10, dt=0.1, iterations=100)
    x0 = np.zeros(g.shape)
    x0[5, 5] = 100.0
    x = np.zeros(g.shape)

    diffuse(g, FieldKind.SCALAR, x, x0, 0.1)

    assert x[5, 5] < 100.0
    for i, j in [(4, 5), (6, 5), (5, 4), (5, 6)]:
        assert x[i, j] > 0.0
    assert x[1:-1, 1:-1].sum() == pytest.approx(100.0, rel=1e-6)
    assert (x >= 0).all()


def test_result_does_not_depend_on_stale_output(rng):
    g = FluidGrid(9, 9, dt=0.1)
    x0 = rng.normal(size=g.shape)
    clean = np.zeros(g.shape)
    stale = rng.normal(size=g.shape) * 50
    diffuse(g, FieldKind.VELOCITY_Y, clean, x0, 0.05)
    diffuse(g, FieldKind.VELOCITY_Y, stale, x0, 0.05)
    np.testing.assert_array_equal(clean, stale)


def test_applies_the_kind_boundary(rng):
    g = FluidGrid(8, 8)
    x0 = rng.normal(size=g.shape)
    x = np.zeros(g.shape)
    diffuse(g, FieldKind.VELOCITY_X, x, x0, 0.01)
    np.testing.assert_array_equal(x[0, 1:-1], -x[1, 1:-1])
