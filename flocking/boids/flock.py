"""
Vectorized force phase for the whole flock.

Reads only the snapshot and the per-boid limits, writes only its own output
arrays, so nothing computed here can observe a boid that was already moved
this tick.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from flocking.boids.boundary import border_repulsion_batch
from flocking.boids.perception import neighbor_masks
from flocking.constants import (
    GOAL_EPSILON,
    GOAL_INSIDE_FORCE_MULTIPLIER,
    GOAL_OUTSIDE_FORCE_MULTIPLIER,
)
from flocking.core.store import FlockSnapshot
from flocking.math import clamp_rows, normalize_rows
from flocking.resources import (
    BoidSettings,
    BoundaryPolicy,
    SteeringForces,
    SteeringMode,
    WorldBounds,
)
from flocking.types import Vector2


def separation_forces(
    positions: np.ndarray, mask: np.ndarray, distances: np.ndarray
) -> np.ndarray:
    # away[i, j] = positions[i] - positions[j]
    away = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
    usable = mask & (distances > 0.0)
    dist_sq = np.where(usable, distances * distances, 1.0)
    weighted = np.where(usable[:, :, np.newaxis], away / dist_sq[:, :, np.newaxis], 0.0)
    return normalize_rows(weighted.sum(axis=1))


def _mean_offset(
    values: np.ndarray, own: np.ndarray, mask: np.ndarray
) -> np.ndarray:
    counts = mask.sum(axis=1)[:, np.newaxis]
    totals = mask.astype(np.float64) @ values
    means = totals / np.where(counts > 0, counts, 1)
    return np.where(counts > 0, normalize_rows(means - own), 0.0)


def alignment_forces(velocities: np.ndarray, mask: np.ndarray) -> np.ndarray:
    return _mean_offset(velocities, velocities, mask)


def cohesion_forces(positions: np.ndarray, mask: np.ndarray) -> np.ndarray:
    return _mean_offset(positions, positions, mask)


def seek_with_arrival_batch(
    positions: np.ndarray,
    velocities: np.ndarray,
    target: Vector2,
    max_speeds: np.ndarray,
    max_forces: np.ndarray,
    arrival_radius: float,
) -> np.ndarray:
    to_target = np.array([target.x, target.y], dtype=np.float64) - positions
    distances = np.linalg.norm(to_target, axis=1)

    ramp = max_speeds * np.sqrt(distances / arrival_radius)
    desired_speed = np.where(distances >= arrival_radius, max_speeds, ramp)
    desired = normalize_rows(to_target) * desired_speed[:, np.newaxis]
    steering = desired - velocities

    multiplier = np.where(
        distances > arrival_radius,
        GOAL_OUTSIDE_FORCE_MULTIPLIER,
        GOAL_INSIDE_FORCE_MULTIPLIER,
    )
    steering = clamp_rows(steering, max_forces * multiplier)

    return np.where((distances < GOAL_EPSILON)[:, np.newaxis], 0.0, steering)


def compute_steering(
    snapshot: FlockSnapshot,
    max_speeds: np.ndarray,
    max_forces: np.ndarray,
    settings: BoidSettings,
    bounds: WorldBounds,
    goal: Optional[Vector2] = None,
) -> SteeringForces:
    """
    Net steering force (before the max_force clamp) and border impulse for
    every boid in the snapshot.
    """
    positions = snapshot.positions
    velocities = snapshot.velocities
    n = len(snapshot)

    if n == 0:
        return SteeringForces(np.zeros((0, 2)), np.zeros((0, 2)))

    masks = neighbor_masks(positions, velocities, settings)

    forces = (
        separation_forces(positions, masks.separation, masks.distances)
        * settings.separation_weight
        + alignment_forces(velocities, masks.alignment) * settings.alignment_weight
        + cohesion_forces(positions, masks.cohesion) * settings.cohesion_weight
    )

    if settings.steering_mode is SteeringMode.DESIRED_VELOCITY:
        desired = normalize_rows(forces) * max_speeds[:, np.newaxis]
        forces = desired - velocities

    if goal is not None:
        forces = forces + settings.goal_attraction_weight * seek_with_arrival_batch(
            positions,
            velocities,
            goal,
            max_speeds,
            max_forces,
            settings.goal_arrival_radius,
        )

    if settings.boundary is BoundaryPolicy.SOFT_REPULSION:
        impulses = border_repulsion_batch(
            positions, bounds, settings.border_distance, settings.repulsion_strength
        )
    else:
        impulses = np.zeros((n, 2), dtype=np.float64)

    return SteeringForces(forces=forces, impulses=impulses)
