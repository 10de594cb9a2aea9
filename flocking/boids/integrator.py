from __future__ import annotations

import numpy as np

from flocking.core.store import BoidStore
from flocking.math import HEADING_OFFSET, clamp_rows, heading_from_velocity
from flocking.resources import SteeringForces
from flocking.types import Scalar, Vector2


def integrate_boid(
    position: Vector2,
    velocity: Vector2,
    heading: Scalar,
    force: Vector2,
    mass: Scalar,
    max_speed: Scalar,
    max_force: Scalar,
    dt: Scalar,
    impulse: Vector2 = Vector2(0.0, 0.0),
) -> tuple[Vector2, Vector2, Scalar]:
    """
    One semi-implicit Euler step for a single boid.
    Returns (position, velocity, heading).
    """
    steer = force.clamp_length_max(max_force)
    acceleration = steer / mass

    new_velocity = velocity + acceleration * dt
    new_velocity = new_velocity + impulse * dt
    new_velocity = new_velocity.clamp_length_max(max_speed)

    new_position = position + new_velocity * dt

    if new_velocity.length() > 0.0:
        heading = heading_from_velocity(new_velocity)

    return new_position, new_velocity, heading


def integrate(store: BoidStore, steering: SteeringForces, dt: Scalar) -> None:
    """
    Writes the new velocities, positions and headings into the store.
    Runs after the whole force phase has finished.
    """
    if store.count == 0:
        return

    if len(steering.forces) != store.count:
        raise ValueError(
            f"Expected {store.count} steering rows, got {len(steering.forces)}"
        )

    steer = clamp_rows(steering.forces, store.max_forces)
    acceleration = steer / store.masses[:, np.newaxis]

    velocities = store.velocities
    velocities += acceleration * dt
    velocities += steering.impulses * dt
    velocities[:] = clamp_rows(velocities, store.max_speeds)

    positions = store.positions
    positions += velocities * dt

    speeds = np.linalg.norm(velocities, axis=1)
    moving = speeds > 0.0
    headings = store.headings
    headings[moving] = (
        np.arctan2(velocities[moving, 1], velocities[moving, 0]) - HEADING_OFFSET
    )

