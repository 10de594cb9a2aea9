from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from flocking.constants import (
    ALIGNMENT_RADIUS,
    ALIGNMENT_WEIGHT,
    BORDER_DISTANCE,
    COHESION_RADIUS,
    COHESION_WEIGHT,
    GOAL_ARRIVAL_RADIUS,
    GOAL_ATTRACTION_WEIGHT,
    GRID_HEIGHT,
    GRID_WIDTH,
    PHYSICS_FPS,
    REPULSION_STRENGTH,
    SEPARATION_RADIUS,
    SEPARATION_WEIGHT,
    VIEW_ANGLE,
)
from flocking.errors import ConfigurationError
from flocking.types import Scalar, Vector2


class BoundaryPolicy(str, Enum):
    """What happens to boids at the edge of the world."""

    WRAP = "wrap"
    SOFT_REPULSION = "soft_repulsion"


class SteeringMode(str, Enum):
    """How the weighted flocking forces become the net steering force."""

    # net force is the weighted sum of the unit flocking forces plus the goal force
    WEIGHTED_SUM = "weighted_sum"
    # the weighted sum picks a desired direction at max speed; steer = desired - velocity
    DESIRED_VELOCITY = "desired_velocity"


@dataclass
class BoidSettings:
    """
    Flocking parameters shared by every boid.
    Mutable so a host can edit it between ticks.
    """

    separation_radius: Scalar = SEPARATION_RADIUS
    alignment_radius: Scalar = ALIGNMENT_RADIUS
    cohesion_radius: Scalar = COHESION_RADIUS

    separation_weight: Scalar = SEPARATION_WEIGHT
    alignment_weight: Scalar = ALIGNMENT_WEIGHT
    cohesion_weight: Scalar = COHESION_WEIGHT

    view_angle: Scalar = VIEW_ANGLE

    goal_attraction_weight: Scalar = GOAL_ATTRACTION_WEIGHT
    goal_arrival_radius: Scalar = GOAL_ARRIVAL_RADIUS

    boundary: BoundaryPolicy = BoundaryPolicy.WRAP
    border_distance: Scalar = BORDER_DISTANCE
    repulsion_strength: Scalar = REPULSION_STRENGTH

    steering_mode: SteeringMode = SteeringMode.WEIGHTED_SUM

    def __post_init__(self) -> None:
        self.validate()

    @property
    def half_view_angle(self) -> Scalar:
        return self.view_angle / 2.0

    def validate(self) -> None:
        """
        Checks every parameter. Host edits between ticks may assign plain
        strings to the enum fields; those are coerced here.
        """
        for name, enum_type in (
            ("boundary", BoundaryPolicy),
            ("steering_mode", SteeringMode),
        ):
            try:
                setattr(self, name, enum_type(getattr(self, name)))
            except ValueError as e:
                choices = ", ".join(m.value for m in enum_type)
                raise ConfigurationError(
                    name, f"must be one of {choices}, got {getattr(self, name)!r}"
                ) from e

        for name in (
            "separation_radius",
            "alignment_radius",
            "cohesion_radius",
            "separation_weight",
            "alignment_weight",
            "cohesion_weight",
            "goal_attraction_weight",
            "repulsion_strength",
        ):
            value = getattr(self, name)
            if math.isnan(value) or value < 0.0:
                raise ConfigurationError(name, f"must be non-negative, got {value}")

        if not 0.0 <= self.view_angle <= math.tau:
            raise ConfigurationError(
                "view_angle", f"must be within [0, 2*pi], got {self.view_angle}"
            )

        if not self.goal_arrival_radius > 0.0:
            raise ConfigurationError(
                "goal_arrival_radius",
                f"must be positive, got {self.goal_arrival_radius}",
            )

        if not self.border_distance > 0.0:
            raise ConfigurationError(
                "border_distance", f"must be positive, got {self.border_distance}"
            )


@dataclass
class WorldBounds:
    """
    Centered rectangle [-width/2, width/2] x [-height/2, height/2].
    Resizing never moves existing boids.
    """

    width: Scalar = GRID_WIDTH
    height: Scalar = GRID_HEIGHT

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not value > 0.0:
                raise ConfigurationError(name, f"must be positive, got {value}")

    @property
    def half_extents(self) -> np.ndarray:
        return np.array([self.width / 2.0, self.height / 2.0], dtype=np.float64)


@dataclass(frozen=True)
class GoalPoint:
    """World-space target resolved by the host for the current tick."""

    point: Optional[Vector2] = None

    @property
    def active(self) -> bool:
        return self.point is not None


@dataclass(frozen=True)
class SimulationTime:
    """Published by the host before every tick."""

    fixed_delta_seconds: float = 1.0 / PHYSICS_FPS
    # fixed_delta_seconds * time_scale, what the integrator uses
    delta_seconds: float = 1.0 / PHYSICS_FPS
    # 0 pauses the flock
    time_scale: float = 1.0
    elapsed_seconds: float = 0.0
    tick: int = 0


@dataclass(frozen=True)
class SteeringForces:
    """
    Per-boid output slots of the force phase, consumed by integration.
    Row i belongs to store row i.
    """

    forces: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    impulses: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
