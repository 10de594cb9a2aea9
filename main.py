"""
Headless flocking runner.

Spawns a flock, runs it for a number of fixed ticks and logs flock metrics.

Examples:
    python main.py --boids 300 --ticks 600
    python main.py --boundary soft_repulsion --goal 100 0 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from flocking.boids.spawn import spawn_flock
from flocking.constants import (
    GRID_HEIGHT,
    GRID_WIDTH,
    NUMBER_BOIDS,
    PARAMETER_RANGES,
    PHYSICS_FPS,
)
from flocking.core.application import Application
from flocking.errors import ConfigurationError
from flocking.resources import (
    BoidSettings,
    BoundaryPolicy,
    GoalPoint,
    SteeringMode,
    WorldBounds,
)
from flocking.types import Vector2

logger = logging.getLogger("flocking")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--boids", type=int, default=NUMBER_BOIDS)
    parser.add_argument("--ticks", type=int, default=PHYSICS_FPS * 10)
    parser.add_argument("--fps", type=int, default=PHYSICS_FPS)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--width", type=float, default=GRID_WIDTH)
    parser.add_argument("--height", type=float, default=GRID_HEIGHT)
    parser.add_argument(
        "--boundary",
        choices=[p.value for p in BoundaryPolicy],
        default=BoundaryPolicy.WRAP.value,
    )
    parser.add_argument(
        "--steering",
        choices=[m.value for m in SteeringMode],
        default=SteeringMode.WEIGHTED_SUM.value,
    )
    parser.add_argument(
        "--goal",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        default=None,
        help="fixed world-space goal point",
    )
    parser.add_argument("--metrics-every", type=int, default=PHYSICS_FPS)
    parser.add_argument("--realtime", action="store_true")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
    )
    return parser


def out_of_range(*configs: object) -> List[str]:
    """Names of parameters outside the usual panel ranges."""
    names = []
    for config in configs:
        for name, (low, high) in PARAMETER_RANGES.items():
            value = getattr(config, name, None)
            if value is not None and not low <= value <= high:
                names.append(name)
    return names


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        settings = BoidSettings(
            boundary=BoundaryPolicy(args.boundary),
            steering_mode=SteeringMode(args.steering),
        )
        bounds = WorldBounds(width=args.width, height=args.height)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2

    for name in out_of_range(settings, bounds):
        logger.warning("%s is outside its usual range %s", name, PARAMETER_RANGES[name])

    app = Application(target_fps=args.fps, metrics_interval=args.metrics_every)
    app.world.mutate_resource(settings)
    app.world.mutate_resource(bounds)

    if args.goal is not None:
        app.world.mutate_resource(GoalPoint(Vector2(*args.goal)))

    spawn_flock(
        app.world.store,
        bounds,
        count=args.boids,
        rng=np.random.default_rng(args.seed),
    )

    try:
        app.run(args.ticks, realtime=args.realtime)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
