"""
main.py — Master Entry Point
=============================
Top-level script that runs the 2D solver in its different front ends.

Usage:
    python main.py                      # Headless demo with ASCII previews (default)
    python main.py --mode frames        # Rotating jet, one PNG per frame
    python main.py --mode benchmark     # Per-phase timing breakdown
    python main.py --mode live          # Interactive matplotlib window
    python main.py --mode live --gif out.gif   # Render the live view to a GIF
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from fluid2d import FluidSimulation, GridConstructionError
from fluid2d.sources import add_density_blob, add_oscillating_jet, add_swirl

logger = logging.getLogger("fluid2d.main")


def build_simulation(args) -> FluidSimulation:
    return FluidSimulation(args.width, args.height,
                           viscosity=args.viscosity,
                           diffusion=args.diffusion,
                           dt=args.dt,
                           iterations=args.iterations)


def print_statistics(sim: FluidSimulation):
    stats = sim.statistics()
    print("\nFinal Statistics:")
    print("-----------------")
    print(f"Total density: {stats['total_density']:.2f}")
    print(f"Average density: {stats['average_density']:.4f}")
    print(f"Maximum density: {stats['max_density']:.2f}")
    print(f"Average velocity: {stats['average_velocity']:.4f}")
    print(f"Maximum velocity: {stats['max_velocity']:.4f}")


def run_headless(args):
    """Swirl + two side sources, fading dye, ASCII preview every 20 frames."""
    from exporter import render_ascii, save_text_dump

    sim = build_simulation(args)
    W, H = sim.width, sim.height

    print("Navier-Stokes Fluid Simulation")
    print("==============================")
    print(f"Grid size: {W}x{H}")
    print(f"Viscosity: {args.viscosity}")
    print(f"Diffusion: {args.diffusion}")
    print(f"Time step: {args.dt}")
    print(f"Frames: {args.frames}\n")

    add_density_blob(sim, W // 2, H // 2, radius=3, amount=100.0)
    add_swirl(sim, W // 2, H // 2, radius=15, strength=0.1)

    print("Running simulation...")
    for f in range(args.frames):
        if f % 10 == 0:
            sim.add_density(W // 4, H // 2, 50.0)
            sim.add_density(3 * W // 4, H // 2, 50.0)
            sim.add_velocity(W // 4, H // 2, 2.0, 0.0)
            sim.add_velocity(3 * W // 4, H // 2, -2.0, 0.0)

        sim.step()
        sim.fade_density(args.fade)

        if not sim.is_finite():
            logger.warning("State became non-finite at frame %d; try a smaller dt", sim.frame)
            break

        if f % 20 == 0:
            m = sim.last_metrics
            print(f"Frame {f}/{args.frames} | {m['total_ms']:6.1f}ms | "
                  f"div_max={m['divergence_max']:.5f} | density={m['density_total']:.1f}")
            print("\nDensity field:")
            print(render_ascii(sim, stride=4))
            print()

    print("\nSimulation complete!")

    output = Path(args.output)
    output.mkdir(parents=True, exist_ok=True)
    dump_path = output / "fluid_output.txt"
    save_text_dump(sim, dump_path)
    print(f"Results saved to {dump_path}")

    print_statistics(sim)


def run_frames(args):
    """Rotating jet in the middle of the grid, one grayscale PNG per frame."""
    from exporter import SnapshotRecorder, save_png_frame

    sim = build_simulation(args)
    frames_dir = Path(args.output) / "frames"
    frames_dir.mkdir(parents=True, exist_ok=True)
    recorder = SnapshotRecorder(Path(args.output) / "snapshots", save_every=args.save_every)

    cx, cy = sim.width // 2, sim.height // 2
    for frame in range(1, args.frames + 1):
        add_oscillating_jet(sim, frame, cx, cy, radius=5, density=50.0, speed=20.0)
        sim.step()
        save_png_frame(sim, frames_dir / f"frame_{frame:04d}.png")
        recorder.record(sim)
        print(f"Saved frame {frame}")

    recorder.finish(sim)
    print("Done.")


def run_benchmark(args):
    """
    Detailed performance breakdown.
    Shows how long each physics step takes.
    """
    sim = build_simulation(args)
    W, H = sim.width, sim.height

    print(f"\n{'='*60}")
    print(f"  SOLVER BENCHMARK | {W}x{H} | {args.frames} frames | iter={args.iterations}")
    print(f"{'='*60}")

    # Warm up (includes numba compilation)
    for _ in range(5):
        sim.add_density(W // 2, 2, 5.0)
        sim.step()

    logs = []
    for _ in range(args.frames):
        sim.add_density(W // 2, 2, 3.0)
        sim.add_velocity(W // 2, 2, 0.0, 1.5)
        sim.step()
        logs.append(sim.last_metrics)

    keys = ["diffuse_vel_ms", "project1_ms", "advect_vel_ms", "project2_ms",
            "diffuse_den_ms", "advect_den_ms", "total_ms"]

    print(f"\n{'Step':<20} {'Mean':>8} {'Min':>8} {'Max':>8}")
    print(f"{'─'*50}")
    for k in keys:
        vals = [m[k] for m in logs]
        print(f"  {k:<18} {np.mean(vals):>7.2f}ms {np.min(vals):>7.2f}ms {np.max(vals):>7.2f}ms")

    total_vals = [m["total_ms"] for m in logs]
    print(f"\n{'─'*50}")
    print(f"  FPS (physics only): {1000/np.mean(total_vals):.1f}")


def run_live(args):
    """Live interactive visualization."""
    from visualizer import FluidVisualizer

    sim = build_simulation(args)
    viz = FluidVisualizer(sim)
    if args.gif:
        print(f"Rendering {args.frames} frames to {args.gif}...")
        viz.save_gif(args.gif, fps=10, frames=args.frames)
        print(f"Saved: {args.gif}")
        return

    print(f"Starting live simulation ({sim.width}x{sim.height})...")
    print("Drag to stir, right-click for a random splat. Close the window to exit.\n")
    viz.run(fps=30)


MODES = {
    "headless": run_headless,
    "frames": run_frames,
    "benchmark": run_benchmark,
    "live": run_live,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="2D Stable Fluids Simulation")
    parser.add_argument(
        "--mode", choices=sorted(MODES), default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--width",      type=int,   default=64,     help="Interior cells along x")
    parser.add_argument("--height",     type=int,   default=64,     help="Interior cells along y")
    parser.add_argument("--frames",     type=int,   default=100,    help="Number of frames")
    parser.add_argument("--dt",         type=float, default=0.1,    help="Timestep")
    parser.add_argument("--viscosity",  type=float, default=0.0001, help="Kinematic viscosity")
    parser.add_argument("--diffusion",  type=float, default=0.0001, help="Dye diffusion rate")
    parser.add_argument("--iterations", type=int,   default=20,     help="Gauss-Seidel sweeps per solve")
    parser.add_argument("--fade",       type=float, default=0.01,   help="Dye fade per frame (headless)")
    parser.add_argument("--save-every", type=int,   default=10,     help="Snapshot interval (frames mode)")
    parser.add_argument("--output",     default="output",           help="Output directory")
    parser.add_argument("--gif",        default=None,               help="Live mode: render --frames frames to this GIF instead of a window")
    parser.add_argument("--verbose", "-v", action="store_true",     help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    try:
        MODES[args.mode](args)
    except GridConstructionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
