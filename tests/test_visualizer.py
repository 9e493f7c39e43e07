from types import SimpleNamespace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from fluid2d import FluidSimulation
from visualizer import FluidVisualizer


@pytest.fixture
def viz():
    sim = FluidSimulation(16, 16, 0.0001, 0.0001, 0.1)
    v = FluidVisualizer(sim, dye_amount=50.0, drag_gain=0.5, seed=3)
    yield v
    plt.close(v.fig)


def _mouse(viz, x, y, button=1):
    return SimpleNamespace(inaxes=viz.ax, xdata=x, ydata=y, button=button)


def test_drag_is_queued_until_the_next_tick(viz):
    viz._on_press(_mouse(viz, 5.0, 5.0))
    viz._on_motion(_mouse(viz, 7.2, 5.9))
    assert len(viz._pending) == 2
    assert not viz.sim.grid.density.any()

    viz._apply_pending()

    g = viz.sim.grid
    assert g.density[5, 5] == 50.0
    assert (g.u[5, 5], g.v[5, 5]) == (0.0, 0.0)
    assert g.density[7, 6] == 50.0
    assert g.u[7, 6] == pytest.approx(2 * 0.5)
    assert g.v[7, 6] == pytest.approx(1 * 0.5)
    assert viz._pending == []


def test_motion_without_press_is_ignored(viz):
    viz._on_motion(_mouse(viz, 7.0, 7.0))
    viz._on_press(_mouse(viz, 3.0, 3.0))
    viz._on_release(_mouse(viz, 3.0, 3.0))
    viz._on_motion(_mouse(viz, 9.0, 9.0))
    assert len(viz._pending) == 1


def test_events_outside_the_image_are_ignored(viz):
    viz._on_press(SimpleNamespace(inaxes=None, xdata=None, ydata=None, button=1))
    assert viz._pending == []


def test_right_click_splat_is_reproducible():
    states = []
    for _ in range(2):
        sim = FluidSimulation(16, 16, 0.0001, 0.0001, 0.1)
        v = FluidVisualizer(sim, dye_amount=40.0, seed=11)
        v._on_press(_mouse(v, 8.0, 8.0, button=3))
        assert v._pending[0][0] == "splat"
        v._apply_pending()
        states.append(sim.grid.save_state())
        plt.close(v.fig)

    assert states[0]["density"][8, 8] == 40.0
    speed = np.hypot(states[0]["velocity_x"][8, 8], states[0]["velocity_y"][8, 8])
    assert speed == pytest.approx(5.0)
    for key in states[0]:
        np.testing.assert_array_equal(states[0][key], states[1][key])


def test_update_applies_injections_then_steps(viz):
    viz._on_press(_mouse(viz, 8.0, 8.0))
    artists = viz.update(0)

    assert viz.sim.frame == 1
    assert viz._pending == []
    assert viz.sim.grid.density.sum() > 0.0
    np.testing.assert_array_equal(viz.img.get_array(), viz.sim.grid.density[1:-1, 1:-1].T)
    assert "Frame 1" in viz.title_text.get_text()
    assert len(artists) == 2


def test_sliders_change_parameters(viz):
    viz.visc_slider.set_val(0.0005)
    viz.diff_slider.set_val(0.0)
    assert viz.sim.grid.viscosity == pytest.approx(0.0005)
    assert viz.sim.grid.diffusion == 0.0


def test_save_gif(viz, tmp_path):
    viz._on_press(_mouse(viz, 8.0, 8.0))
    path = viz.save_gif(tmp_path / "stir.gif", fps=5, frames=2)
    assert path.read_bytes()[:4] == b"GIF8"
    assert viz.sim.frame >= 2
