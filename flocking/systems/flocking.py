"""
Scheduler-facing wrappers around the flocking tick.

steering_system (UPDATE) only reads the store and publishes SteeringForces;
integration_system (PHYSICS) consumes them; boundary_system (POST_UPDATE)
applies the wrap policy. Stage order is the barrier between the read and
write phases.
"""

import logging
from dataclasses import replace

import numpy as np

from flocking.boids.boundary import apply_boundary
from flocking.boids.flock import compute_steering
from flocking.boids.integrator import integrate
from flocking.core.world import World
from flocking.resources import (
    BoidSettings,
    GoalPoint,
    SimulationTime,
    SteeringForces,
    WorldBounds,
)

logger = logging.getLogger(__name__)


def steering_system(world: World) -> None:
    settings = world.try_resource(BoidSettings)
    bounds = world.try_resource(WorldBounds)
    if not (settings and bounds):
        return

    settings.validate()
    bounds.validate()

    goal = world.try_resource(GoalPoint)
    store = world.store

    forces = compute_steering(
        store.snapshot(),
        store.max_speeds,
        store.max_forces,
        settings,
        bounds,
        goal.point if goal and goal.active else None,
    )

    if world.has_resource(SteeringForces):
        world.mutate_resource(forces)
    else:
        world.add_resource(forces)


def integration_system(world: World) -> None:
    sim_time = world.try_resource(SimulationTime)
    steering = world.try_resource(SteeringForces)
    if not (sim_time and steering):
        return

    if len(steering.forces) != world.store.count:
        logger.warning(
            "Skipping integration: %d steering rows for %d boids",
            len(steering.forces),
            world.store.count,
        )
        return

    integrate(world.store, steering, sim_time.delta_seconds)

    # Forces are single-use
    world.mutate_resource(
        replace(steering, forces=np.zeros((0, 2)), impulses=np.zeros((0, 2)))
    )


def boundary_system(world: World) -> None:
    settings = world.try_resource(BoidSettings)
    bounds = world.try_resource(WorldBounds)
    if not (settings and bounds):
        return

    apply_boundary(settings.boundary, world.store.positions, bounds)
