# flocking/core/application.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from flocking.boids.metrics import flock_metrics
from flocking.core.scheduler import Scheduler, Stage
from flocking.core.timing import FixedStep
from flocking.core.world import World
from flocking.math import rad_to_deg
from flocking.resources import (
    BoidSettings,
    GoalPoint,
    SimulationTime,
    WorldBounds,
)
from flocking.systems.flocking import (
    boundary_system,
    integration_system,
    steering_system,
)
from flocking.systems.sim_time import advance_time
from flocking.types import Vector2

logger = logging.getLogger(__name__)

GoalProvider = Callable[[World], Optional[Vector2]]


class Application:
    """
    Headless host loop.

    Owns the World and the Scheduler, publishes SimulationTime and the goal
    point every tick, and logs flock metrics every `metrics_interval` ticks.
    """

    def __init__(
        self,
        world: World | None = None,
        target_fps: int = 60,
        goal_provider: GoalProvider | None = None,
        metrics_interval: int = 0,
    ):
        self.world = world if world is not None else World()
        self.scheduler = Scheduler()
        self.timer = FixedStep(target_fps=target_fps)
        self.goal_provider = goal_provider
        self.metrics_interval = metrics_interval

        for resource in (BoidSettings(), WorldBounds(), GoalPoint()):
            if not self.world.has_resource(type(resource)):
                self.world.add_resource(resource)

        self._register_systems()

    def _register_systems(self) -> None:
        self.scheduler.add_system(Stage.INPUT, self._goal_system, name="goal_system")
        self.scheduler.add_system(Stage.UPDATE, steering_system)
        self.scheduler.add_system(Stage.PHYSICS, integration_system)
        self.scheduler.add_system(Stage.POST_UPDATE, boundary_system)

    def _goal_system(self, world: World) -> None:
        if self.goal_provider is None:
            return
        world.mutate_resource(GoalPoint(self.goal_provider(world)))

    def step(self, dt: float | None = None) -> SimulationTime:
        """Runs exactly one tick of `dt` seconds (the fixed step by default)."""
        if dt is not None and dt < 0.0:
            raise ValueError(f"dt must be non-negative, got {dt}")

        sim_time = advance_time(self.world, self.timer.dt if dt is None else dt)
        self.scheduler.run_tick(self.world)

        if self.metrics_interval and sim_time.tick % self.metrics_interval == 0:
            self.log_metrics()

        return sim_time

    def run(self, ticks: int, realtime: bool = False) -> None:
        """
        Runs `ticks` fixed steps. With realtime=True the loop is paced by
        the FixedStep timer instead of running as fast as possible.
        """
        logger.info(
            "Running %d ticks with %d boids (%s)",
            ticks,
            self.world.store.count,
            "realtime" if realtime else "headless",
        )

        done = 0
        self.timer.start()
        while done < ticks:
            due = self.timer.due_ticks() if realtime else 1
            if due == 0:
                time.sleep(self.timer.until_next_tick())
                continue
            for _ in range(min(due, ticks - done)):
                self.step()
                done += 1

        self.log_metrics()

    def log_metrics(self) -> None:
        sim_time = self.world.try_resource(SimulationTime)
        metrics = flock_metrics(self.world.store)
        logger.info(
            "tick=%d t=%.2fs boids=%d polarization=%.3f mean_speed=%.2f "
            "heading=%.1fdeg centroid=(%.1f, %.1f)",
            sim_time.tick if sim_time else 0,
            sim_time.elapsed_seconds if sim_time else 0.0,
            metrics.count,
            metrics.polarization,
            metrics.mean_speed,
            rad_to_deg(metrics.average_heading),
            *metrics.centroid,
        )
