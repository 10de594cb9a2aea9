"""
Who can a boid see?

A boid perceives another boid when the bearing to it lies inside the view
cone around its own velocity and it is closer than a behaviour's radius.
Visibility is not symmetric: a boid chasing another sees it, the one in
front does not see back.

When a boid is not moving its view direction is the zero vector, so the
cosine against any bearing is 0 and the bearing angle is pi/2. Such a boid
sees everyone when view_angle >= pi and no one otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple

import numpy as np

from flocking.math import normalize_rows, safe_acos
from flocking.resources import BoidSettings
from flocking.types import Vector2

NeighborState = Tuple[Vector2, Vector2]  # (position, velocity)


@dataclass
class Neighbors:
    separation: List[NeighborState] = field(default_factory=list)
    alignment: List[NeighborState] = field(default_factory=list)
    cohesion: List[NeighborState] = field(default_factory=list)


class NeighborMasks(NamedTuple):
    """Boolean (N, N) matrices; [i, j] is True when i perceives j."""

    separation: np.ndarray
    alignment: np.ndarray
    cohesion: np.ndarray
    distances: np.ndarray


def is_in_view(
    boid_pos: Vector2, boid_dir: Vector2, other_pos: Vector2, view_angle: float
) -> bool:
    to_other = (other_pos - boid_pos).normalize_or_zero()
    angle = safe_acos(boid_dir.dot(to_other))
    return angle <= view_angle / 2.0


def classify_neighbors(
    index: int,
    positions: np.ndarray,
    velocities: np.ndarray,
    settings: BoidSettings,
) -> Neighbors:
    """
    Buckets every boid visible to boid `index` by the three perception radii.
    positions and velocities are the (N, 2) snapshot of the current tick.
    """
    pos = Vector2(*positions[index])
    direction = Vector2(*velocities[index]).normalize_or_zero()

    neighbors = Neighbors()

    for j in range(len(positions)):
        if j == index:
            continue

        other_pos = Vector2(*positions[j])
        if not is_in_view(pos, direction, other_pos, settings.view_angle):
            continue

        other_vel = Vector2(*velocities[j])
        distance = pos.distance(other_pos)

        if distance < settings.separation_radius:
            neighbors.separation.append((other_pos, other_vel))
        if distance < settings.alignment_radius:
            neighbors.alignment.append((other_pos, other_vel))
        if distance < settings.cohesion_radius:
            neighbors.cohesion.append((other_pos, other_vel))

    return neighbors


def neighbor_masks(
    positions: np.ndarray, velocities: np.ndarray, settings: BoidSettings
) -> NeighborMasks:
    """
    Whole-flock version of classify_neighbors.
    Brute force O(N^2), same neighbor sets as the per-boid scan.
    """
    n = len(positions)

    # offsets[i, j] = positions[j] - positions[i]
    offsets = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    distances = np.linalg.norm(offsets, axis=2)

    directions = normalize_rows(velocities)
    bearings = normalize_rows(offsets)

    cos_angles = np.einsum("ik,ijk->ij", directions, bearings)
    angles = np.arccos(np.clip(cos_angles, -1.0, 1.0))

    visible = angles <= settings.half_view_angle
    visible[np.arange(n), np.arange(n)] = False

    return NeighborMasks(
        separation=visible & (distances < settings.separation_radius),
        alignment=visible & (distances < settings.alignment_radius),
        cohesion=visible & (distances < settings.cohesion_radius),
        distances=distances,
    )
