"""
Per-boid steering forces.

These are the reference implementations working on single vectors. The
flock-wide tick uses the vectorized versions in flocking.boids.flock, which
must produce the same numbers.

Separation, alignment and cohesion each return a unit vector or zero. The
final normalization throws away how many neighbors contributed, so fifty
aligned neighbors pull exactly as hard as one. Only separation keeps some
notion of magnitude, through the inverse-distance weighting before the sum
is normalized.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from flocking.boids.perception import Neighbors, NeighborState
from flocking.constants import (
    GOAL_EPSILON,
    GOAL_INSIDE_FORCE_MULTIPLIER,
    GOAL_OUTSIDE_FORCE_MULTIPLIER,
)
from flocking.errors import ConfigurationError
from flocking.math import sum_vec
from flocking.resources import BoidSettings, SteeringMode
from flocking.types import Scalar, Vector2


def calculate_separation(
    boid_pos: Vector2, neighbors: Sequence[NeighborState]
) -> Vector2:
    if not neighbors:
        return Vector2.zero()

    steer = Vector2.zero()
    for neighbor_pos, _ in neighbors:
        diff = boid_pos - neighbor_pos
        distance = diff.length()
        # closer neighbors push harder
        if distance > 0.0:
            steer = steer + diff.normalize_or_zero() / distance

    return steer.normalize_or_zero()


def calculate_alignment(
    boid_velocity: Vector2, neighbors: Sequence[NeighborState]
) -> Vector2:
    if not neighbors:
        return Vector2.zero()

    avg_velocity = sum_vec(vel for _, vel in neighbors) / len(neighbors)
    return (avg_velocity - boid_velocity).normalize_or_zero()


def calculate_cohesion(
    boid_pos: Vector2, neighbors: Sequence[NeighborState]
) -> Vector2:
    if not neighbors:
        return Vector2.zero()

    center = sum_vec(pos for pos, _ in neighbors) / len(neighbors)
    return (center - boid_pos).normalize_or_zero()


def arrival_speed(distance: Scalar, max_speed: Scalar, arrival_radius: Scalar) -> Scalar:
    """Square-root slow-down inside the arrival radius."""
    if arrival_radius <= 0.0:
        raise ConfigurationError(
            "goal_arrival_radius", f"must be positive, got {arrival_radius}"
        )
    if distance >= arrival_radius:
        return max_speed
    return max_speed * math.sqrt(distance / arrival_radius)


def arrival_force_multiplier(distance: Scalar, arrival_radius: Scalar) -> Scalar:
    if distance > arrival_radius:
        return GOAL_OUTSIDE_FORCE_MULTIPLIER
    return GOAL_INSIDE_FORCE_MULTIPLIER


def seek_with_arrival(
    position: Vector2,
    velocity: Vector2,
    target: Vector2,
    max_speed: Scalar,
    max_force: Scalar,
    arrival_radius: Scalar,
) -> Vector2:
    """
    Steering towards target that eases off inside arrival_radius.

    Outside the radius the force limit is doubled so a boid can close long
    distances against its own max_force clamp.
    """
    to_target = target - position
    distance = to_target.length()

    if distance < GOAL_EPSILON:
        return Vector2.zero()

    desired_speed = arrival_speed(distance, max_speed, arrival_radius)
    desired_velocity = to_target.normalize_or_zero() * desired_speed
    steering = desired_velocity - velocity

    multiplier = arrival_force_multiplier(distance, arrival_radius)
    return steering.clamp_length_max(max_force * multiplier)


def combine_forces(
    position: Vector2,
    velocity: Vector2,
    neighbors: Neighbors,
    settings: BoidSettings,
    max_speed: Scalar,
    max_force: Scalar,
    goal: Optional[Vector2] = None,
) -> Vector2:
    """
    Net steering force for one boid before the max_force clamp.
    """
    separation = calculate_separation(position, neighbors.separation)
    alignment = calculate_alignment(velocity, neighbors.alignment)
    cohesion = calculate_cohesion(position, neighbors.cohesion)

    flocking = (
        separation * settings.separation_weight
        + alignment * settings.alignment_weight
        + cohesion * settings.cohesion_weight
    )

    if settings.steering_mode is SteeringMode.DESIRED_VELOCITY:
        desired = flocking.normalize_or_zero() * max_speed
        flocking = desired - velocity

    if goal is None:
        return flocking

    seek = seek_with_arrival(
        position,
        velocity,
        goal,
        max_speed,
        max_force,
        settings.goal_arrival_radius,
    )
    return flocking + seek * settings.goal_attraction_weight
