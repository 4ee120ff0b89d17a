import argparse
from typing import Optional

import numpy as np

from ..config import Config, WebSettings
from ..core.simulation import Simulation
from ..utilities.log import CORELOG


def random_anchors(rng: np.random.Generator, count: int, width: float, height: float, margin: float = 60.0):
    angles = np.sort(rng.uniform(0, 2 * np.pi, count))
    radii = rng.uniform(0.6, 1.0, count) * (min(width, height) / 2 - margin)
    cx, cy = width / 2, height / 2
    return [(cx + r * np.cos(a), cy + r * np.sin(a)) for a, r in zip(angles, radii)]


def run_headless(anchor_count: int = 6, frames: int = 600, settings: Optional[WebSettings] = None,
                 seed: int = 42, width: float = 960, height: float = 600, report_interval: int = 100,
                 save_path: Optional[str] = None) -> Simulation:
    settings = settings or WebSettings()
    sim = Simulation(settings=settings, seed=seed, width=width, height=height)

    layout_rng = np.random.default_rng(seed)
    for x, y in random_anchors(layout_rng, anchor_count, width, height):
        sim.add_anchor(float(x), float(y))

    print(f"Starting weave: {anchor_count} anchors, {frames} frames, seed={seed}")

    for frame in range(frames):
        sim.step(1.0)

        if report_interval and frame % report_interval == 0 and sim.web is not None:
            kinds = {}
            for spider in sim.spiders:
                kinds[spider.kind.value] = kinds.get(spider.kind.value, 0) + 1
            print(f"Frame {frame:5d}: woven={sim.web.build_progress * 100:5.1f}%, spiders on " +
                  ", ".join(f"{k}={n}" for k, n in sorted(kinds.items())))

    if sim.web is not None:
        counts = sim.web.counts()
        print(f"Weave complete after {frames} frames: built={sim.web.built}, threads={counts}")

    if save_path:
        from ..viz.render import save_scene
        save_scene(sim.snapshot(), sim.settings, save_path, width=width, height=height)
        print(f"Saved final frame to {save_path}")

    CORELOG.sync()
    return sim


def main():
    Config.validate()

    parser = argparse.ArgumentParser(description="Headless spider web weaving run")
    parser.add_argument("--anchors", type=int, default=6,
                        help="Number of random anchors")
    parser.add_argument("--frames", type=int, default=600,
                        help="Number of frames to simulate")
    parser.add_argument("--density", type=float, default=Config.DENSITY)
    parser.add_argument("--tension", type=float, default=Config.TENSION)
    parser.add_argument("--speed", type=float, default=Config.SPIDER_SPEED)
    parser.add_argument("--seed", type=int, default=Config.SEED,
                        help="Random seed for reproducibility")
    parser.add_argument("--report-interval", type=int, default=100,
                        help="Print stats every N frames")
    parser.add_argument("--save", type=str, default=None,
                        help="Save the final frame as an image")

    args = parser.parse_args()

    settings = WebSettings(density=args.density, tension=args.tension, spider_speed=args.speed).clamped()
    run_headless(
        anchor_count=args.anchors,
        frames=args.frames,
        settings=settings,
        seed=args.seed,
        width=Config.WIDTH,
        height=Config.HEIGHT,
        report_interval=args.report_interval,
        save_path=args.save,
    )


if __name__ == "__main__":
    main()
