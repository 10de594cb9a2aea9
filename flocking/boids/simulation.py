"""
One flocking tick.

    snapshot -> neighbors -> steering -> integrate -> boundary

The tick is two-phase. Every force is computed from a snapshot taken before
the first write, and the store is only touched once all forces exist, so the
order in which boids are stored cannot bias the result.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from flocking.boids.boundary import apply_boundary, border_repulsion, wrap_position
from flocking.boids.flock import compute_steering
from flocking.boids.integrator import integrate, integrate_boid
from flocking.boids.perception import classify_neighbors
from flocking.boids.steering import combine_forces
from flocking.core.store import BoidStore
from flocking.resources import BoidSettings, BoundaryPolicy, WorldBounds
from flocking.types import Scalar, Vector2


def _check_delta(delta_time: Scalar) -> None:
    if delta_time < 0.0:
        raise ValueError(f"delta_time must be non-negative, got {delta_time}")


def advance(
    store: BoidStore,
    delta_time: Scalar,
    settings: BoidSettings,
    bounds: WorldBounds,
    goal: Optional[Vector2] = None,
) -> BoidStore:
    """
    Advances every boid in `store` by `delta_time` seconds, in place.

    Settings and bounds are re-read on every call, so a host may edit them
    freely between ticks. `goal` is an already resolved world-space point,
    or None for no goal seeking.
    """
    _check_delta(delta_time)
    settings.validate()
    bounds.validate()

    if store.count == 0:
        return store

    # Phase 1: read-only
    snapshot = store.snapshot()
    steering = compute_steering(
        snapshot,
        store.max_speeds,
        store.max_forces,
        settings,
        bounds,
        goal,
    )

    # Phase 2: write-back
    integrate(store, steering, delta_time)
    apply_boundary(settings.boundary, store.positions, bounds)

    return store


def advance_reference(
    store: BoidStore,
    delta_time: Scalar,
    settings: BoidSettings,
    bounds: WorldBounds,
    goal: Optional[Vector2] = None,
) -> BoidStore:
    """
    Same tick as advance() computed one boid at a time with the scalar
    reference functions. Slow; used to check the vectorized path.
    """
    _check_delta(delta_time)
    settings.validate()
    bounds.validate()

    snapshot = store.snapshot()
    positions, velocities = snapshot.positions, snapshot.velocities
    soft = settings.boundary is BoundaryPolicy.SOFT_REPULSION

    results = []
    for i in range(store.count):
        position = Vector2(*positions[i])
        velocity = Vector2(*velocities[i])

        neighbors = classify_neighbors(i, positions, velocities, settings)
        force = combine_forces(
            position,
            velocity,
            neighbors,
            settings,
            float(store.max_speeds[i]),
            float(store.max_forces[i]),
            goal,
        )

        impulse = Vector2.zero()
        if soft:
            impulse = border_repulsion(
                position,
                bounds,
                settings.border_distance,
                settings.repulsion_strength,
            )

        results.append(
            integrate_boid(
                position,
                velocity,
                float(store.headings[i]),
                force,
                float(store.masses[i]),
                float(store.max_speeds[i]),
                float(store.max_forces[i]),
                delta_time,
                impulse,
            )
        )

    for i, (position, velocity, heading) in enumerate(results):
        if settings.boundary is BoundaryPolicy.WRAP:
            position = wrap_position(position, bounds)
        store.positions[i] = tuple(position)
        store.velocities[i] = tuple(velocity)
        store.headings[i] = heading

    return store


def max_speed_violation(store: BoidStore) -> float:
    """Largest amount by which any boid exceeds its max_speed (0 if none)."""
    if store.count == 0:
        return 0.0
    speeds = np.linalg.norm(store.velocities, axis=1)
    return float(np.max(np.maximum(speeds - store.max_speeds, 0.0)))
