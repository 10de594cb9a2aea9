# flocking/boids/__init__.py
from flocking.boids.perception import (
    Neighbors,
    classify_neighbors,
    is_in_view,
    neighbor_masks,
)
from flocking.boids.simulation import advance
from flocking.boids.spawn import spawn_boid, spawn_flock
from flocking.boids.steering import (
    calculate_alignment,
    calculate_cohesion,
    calculate_separation,
    seek_with_arrival,
)

__all__ = [
    "advance",
    "Neighbors",
    "classify_neighbors",
    "is_in_view",
    "neighbor_masks",
    "calculate_separation",
    "calculate_alignment",
    "calculate_cohesion",
    "seek_with_arrival",
    "spawn_boid",
    "spawn_flock",
]
