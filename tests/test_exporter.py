import json

import matplotlib.pyplot as plt
import numpy as np
import pytest

from exporter import (SnapshotRecorder, density_char, render_ascii,
                      save_png_frame, save_text_dump)
from fluid2d import FluidSimulation


@pytest.mark.parametrize("value,char", [
    (0.0, " "), (0.5, "."), (2.0, ":"), (7.0, "+"),
    (15.0, "*"), (30.0, "#"), (40.0, "@"), (1e6, "@"),
])
def test_density_char(value, char):
    assert density_char(value) == char


def test_render_ascii(sim):
    sim.add_density(4, 4, 100.0)
    text = render_ascii(sim, stride=4)
    rows = text.split("\n")
    assert len(rows) == 3
    assert all(len(r) == 3 for r in rows)
    assert rows[1][1] == "@"
    assert text.count("@") == 1


def test_text_dump(sim, tmp_path):
    sim.add_density(5, 5, 100.0)
    sim.add_velocity(3, 2, 0.5, 0.0)
    path = tmp_path / "out.txt"

    n_rows = save_text_dump(sim, path)

    lines = path.read_text().splitlines()
    assert lines[0] == "# Navier-Stokes Fluid Simulation Output"
    assert lines[1] == "# Grid size: 10x10"
    assert lines[2] == "# Format: x y density velocityX velocityY"
    assert lines[3] == ""
    assert n_rows == 2
    assert lines[4:] == [
        "3 2 0.000000 0.500000 0.000000",
        "5 5 100.000000 0.000000 0.000000",
    ]


def test_png_frame(sim, tmp_path):
    sim.add_density(5, 5, 1.0)
    path = tmp_path / "frame.png"
    save_png_frame(sim, path)
    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_snapshot_recorder(tmp_path):
    sim = FluidSimulation(8, 8, 0.0001, 0.0001, 0.1)
    rec = SnapshotRecorder(tmp_path / "snaps", save_every=2)
    sim.add_density(4, 4, 10.0)
    written = []
    for _ in range(4):
        sim.step()
        written.append(rec.record(sim))
    meta = rec.finish(sim)

    assert written == [False, True, False, True]
    assert rec.saved_frames == [2, 4]
    density = np.load(tmp_path / "snaps" / "frame_0004_density.npy")
    np.testing.assert_array_equal(density, sim.grid.density)
    assert (tmp_path / "snaps" / "frame_0002_divergence.npy").exists()

    on_disk = json.loads((tmp_path / "snaps" / "metadata.json").read_text())
    assert on_disk["saved_frames"] == [2, 4]
    assert on_disk["width"] == 8
    assert meta["iterations"] == 20


def test_png_frame_has_y_up_like_the_viewer(tmp_path):
    sim = FluidSimulation(6, 4, 0.0001, 0.0001, 0.1)
    sim.grid.density[1, 4] = 1.0    # left column, top row
    path = tmp_path / "frame.png"
    save_png_frame(sim, path)

    image = plt.imread(path)
    assert image.shape[:2] == (4, 6)
    assert image[0, 0, 0] == pytest.approx(1.0)
    assert image[-1, 0, 0] == pytest.approx(0.0)
