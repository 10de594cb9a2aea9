from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from flocking.core.store import BoidStore
from flocking.math import normalize_rows


@dataclass(frozen=True)
class FlockMetrics:
    count: int
    # radians, measured from +X
    average_heading: float
    # 0 = directions cancel out, 1 = everyone flies the same way
    polarization: float
    mean_speed: float
    centroid: tuple[float, float]


def flock_metrics(store: BoidStore) -> FlockMetrics:
    """Summary statistics of the current flock state."""
    if store.count == 0:
        return FlockMetrics(0, 0.0, 0.0, 0.0, (0.0, 0.0))

    velocities = store.velocities
    directions = normalize_rows(velocities)
    mean_direction = directions.mean(axis=0)
    centroid = store.positions.mean(axis=0)

    return FlockMetrics(
        count=store.count,
        average_heading=float(np.arctan2(mean_direction[1], mean_direction[0])),
        polarization=float(np.linalg.norm(mean_direction)),
        mean_speed=float(np.linalg.norm(velocities, axis=1).mean()),
        centroid=(float(centroid[0]), float(centroid[1])),
    )
