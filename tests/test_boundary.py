import numpy as np
import pytest

from fluid2d import FieldKind, apply_boundary


@pytest.fixture
def field(rng):
    return rng.normal(size=(8, 6))


def test_velocity_x_reflects_at_left_and_right(field):
    apply_boundary(FieldKind.VELOCITY_X, field)
    np.testing.assert_array_equal(field[0, 1:-1], -field[1, 1:-1])
    np.testing.assert_array_equal(field[-1, 1:-1], -field[-2, 1:-1])
    # tangential walls copy directly
    np.testing.assert_array_equal(field[1:-1, 0], field[1:-1, 1])
    np.testing.assert_array_equal(field[1:-1, -1], field[1:-1, -2])


def test_velocity_y_reflects_at_bottom_and_top(field):
    apply_boundary(FieldKind.VELOCITY_Y, field)
    np.testing.assert_array_equal(field[1:-1, 0], -field[1:-1, 1])
    np.testing.assert_array_equal(field[1:-1, -1], -field[1:-1, -2])
    np.testing.assert_array_equal(field[0, 1:-1], field[1, 1:-1])
    np.testing.assert_array_equal(field[-1, 1:-1], field[-2, 1:-1])


def test_scalar_copies_without_sign_flip(field):
    apply_boundary(FieldKind.SCALAR, field)
    np.testing.assert_array_equal(field[0, 1:-1], field[1, 1:-1])
    np.testing.assert_array_equal(field[-1, 1:-1], field[-2, 1:-1])
    np.testing.assert_array_equal(field[1:-1, 0], field[1:-1, 1])
    np.testing.assert_array_equal(field[1:-1, -1], field[1:-1, -2])


@pytest.mark.parametrize("kind", list(FieldKind))
def test_corners_average_their_neighbours(field, kind):
    apply_boundary(kind, field)
    assert field[0, 0] == pytest.approx(0.5 * (field[1, 0] + field[0, 1]))
    assert field[0, -1] == pytest.approx(0.5 * (field[1, -1] + field[0, -2]))
    assert field[-1, 0] == pytest.approx(0.5 * (field[-2, 0] + field[-1, 1]))
    assert field[-1, -1] == pytest.approx(0.5 * (field[-2, -1] + field[-1, -2]))


@pytest.mark.parametrize("kind", list(FieldKind))
def test_interior_untouched(field, kind):
    interior = field[1:-1, 1:-1].copy()
    apply_boundary(kind, field)
    np.testing.assert_array_equal(field[1:-1, 1:-1], interior)


def test_rejects_unknown_kind(field):
    with pytest.raises(ValueError):
        apply_boundary(1, field)
