from __future__ import annotations

import numpy as np

from flocking.resources import BoundaryPolicy, WorldBounds
from flocking.types import Scalar, Vector2


def wrap_position(pos: Vector2, bounds: WorldBounds) -> Vector2:
    """Teleports a point that left the world to the opposite edge."""
    x, y = pos.x, pos.y
    hw, hh = bounds.width / 2.0, bounds.height / 2.0

    if x > hw:
        x = -hw
    if x < -hw:
        x = hw
    if y > hh:
        y = -hh
    if y < -hh:
        y = hh

    return Vector2(x, y)


def wrap_positions(positions: np.ndarray, bounds: WorldBounds) -> None:
    """In-place wrap of an (N, 2) position array. Velocities are untouched."""
    for axis, extent in enumerate((bounds.width, bounds.height)):
        half = extent / 2.0
        coords = positions[:, axis]
        over = coords > half
        under = coords < -half
        coords[over] = -half
        coords[under] = half


def border_repulsion(
    pos: Vector2,
    bounds: WorldBounds,
    border_distance: Scalar,
    repulsion_strength: Scalar,
) -> Vector2:
    """
    Inward push that grows linearly from 0 at border_distance to
    repulsion_strength at the edge itself.
    """
    hw, hh = bounds.width / 2.0, bounds.height / 2.0
    fx, fy = 0.0, 0.0

    dist_left = pos.x + hw
    if dist_left < border_distance:
        fx += (1.0 - dist_left / border_distance) * repulsion_strength

    dist_right = hw - pos.x
    if dist_right < border_distance:
        fx -= (1.0 - dist_right / border_distance) * repulsion_strength

    dist_bottom = pos.y + hh
    if dist_bottom < border_distance:
        fy += (1.0 - dist_bottom / border_distance) * repulsion_strength

    dist_top = hh - pos.y
    if dist_top < border_distance:
        fy -= (1.0 - dist_top / border_distance) * repulsion_strength

    return Vector2(fx, fy)


def border_repulsion_batch(
    positions: np.ndarray,
    bounds: WorldBounds,
    border_distance: Scalar,
    repulsion_strength: Scalar,
) -> np.ndarray:
    half = bounds.half_extents
    impulses = np.zeros_like(positions, dtype=np.float64)

    # distance to the low edge and to the high edge on each axis
    dist_low = positions + half
    dist_high = half - positions

    push_low = np.where(
        dist_low < border_distance,
        (1.0 - dist_low / border_distance) * repulsion_strength,
        0.0,
    )
    push_high = np.where(
        dist_high < border_distance,
        (1.0 - dist_high / border_distance) * repulsion_strength,
        0.0,
    )

    impulses += push_low
    impulses -= push_high
    return impulses


def apply_boundary(
    policy: BoundaryPolicy, positions: np.ndarray, bounds: WorldBounds
) -> None:
    """Post-integration step. Only the wrap policy moves boids here."""
    if policy is BoundaryPolicy.WRAP:
        wrap_positions(positions, bounds)
