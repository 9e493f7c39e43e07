"""
exporter.py — Snapshot, Text and Image Export
==============================================
Turns simulation state into something you can look at or keep.

  render_ascii()     → density as a block of characters (console preview)
  save_text_dump()   → "x y density velocityX velocityY" rows
  save_png_frame()   → grayscale density image
  SnapshotRecorder   → .npy arrays per frame + metadata.json

Snapshot directory layout:
  output/
    frame_0000_density.npy       ← shape (W+2, H+2)
    frame_0000_velocity_x.npy
    frame_0000_velocity_y.npy
    frame_0000_divergence.npy    ← shape (W, H)
    ...
    metadata.json                ← grid params, saved frames

Load back with:
  d = np.load("output/frame_0000_density.npy")
"""

import json
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)

# (upper bound, char) pairs, checked in order
DENSITY_RAMP = [
    (0.1, " "),
    (1.0, "."),
    (5.0, ":"),
    (10.0, "+"),
    (20.0, "*"),
    (40.0, "#"),
]
DENSITY_MAX_CHAR = "@"


def density_char(density: float) -> str:
    """Map a density value to one display character."""
    for bound, char in DENSITY_RAMP:
        if density < bound:
            return char
    return DENSITY_MAX_CHAR


def render_ascii(sim, stride: int = 4) -> str:
    """
    Sample every `stride`-th cell of the density field into text rows.
    One row per sampled y, top of the string = y = 0.
    """
    rows = []
    for j in range(0, sim.height, stride):
        rows.append("".join(density_char(sim.query(i, j).density)
                            for i in range(0, sim.width, stride)))
    return "\n".join(rows)


def save_text_dump(sim, path) -> int:
    """
    Write every non-negligible cell as "x y density velocityX velocityY".

    A cell is written when density > 0.01 or |vx| > 0.001 or |vy| > 0.001.

    Returns:
        Number of data rows written
    """
    path = Path(path)
    n_rows = 0
    with open(path, "w") as f:
        f.write("# Navier-Stokes Fluid Simulation Output\n")
        f.write(f"# Grid size: {sim.width}x{sim.height}\n")
        f.write("# Format: x y density velocityX velocityY\n")
        f.write("\n")
        for j in range(sim.height):
            for i in range(sim.width):
                density, vx, vy = sim.query(i, j)
                if density > 0.01 or abs(vx) > 0.001 or abs(vy) > 0.001:
                    f.write(f"{i} {j} {density:.6f} {vx:.6f} {vy:.6f}\n")
                    n_rows += 1
    logger.info("Wrote %d rows to %s", n_rows, path)
    return n_rows


def save_png_frame(sim, path):
    """Save clip(density, 0, 1) of the interior as a grayscale PNG, x right and y up like the viewer."""
    path = Path(path)
    image = np.clip(sim.grid.density[1:-1, 1:-1], 0.0, 1.0).T
    plt.imsave(path, image, cmap="gray", vmin=0.0, vmax=1.0, origin="lower")
    logger.info("Saved frame %s", path)


class SnapshotRecorder:
    """
    Stores simulation snapshots as .npy files.

    Usage:
        rec = SnapshotRecorder("output/")
        for frame in range(100):
            sim.step()
            rec.record(sim)
        rec.finish(sim)
    """

    def __init__(self, output_dir="output", save_every: int = 1):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.save_every = save_every
        self.saved_frames = []

    def record(self, sim) -> bool:
        """Save a snapshot if this frame is due. Returns True if one was written."""
        if sim.frame % self.save_every != 0:
            return False
        snapshot = sim.get_snapshot()
        prefix = self.output_dir / f"frame_{snapshot['frame']:04d}"
        for key in ("density", "velocity_x", "velocity_y", "divergence"):
            np.save(f"{prefix}_{key}.npy", snapshot[key])
        self.saved_frames.append(snapshot["frame"])
        return True

    def finish(self, sim) -> dict:
        """Write metadata.json for everything recorded so far."""
        g = sim.grid
        metadata = {
            "width"       : g.width,
            "height"      : g.height,
            "dt"          : g.dt,
            "viscosity"   : g.viscosity,
            "diffusion"   : g.diffusion,
            "iterations"  : g.iterations,
            "save_every"  : self.save_every,
            "saved_frames": self.saved_frames,
            "statistics"  : sim.statistics(),
        }
        meta_path = self.output_dir / "metadata.json"
        with open(meta_path, "w") as f:
            json.dump(metadata, f, indent=2)
        logger.info("Saved %d snapshots → %s", len(self.saved_frames), self.output_dir)
        return metadata
