import math
from dataclasses import dataclass

from flocking.constants import BOID_MASS, BOID_MAX_FORCE, BOID_MAX_SPEED
from flocking.errors import ConfigurationError
from flocking.types import Scalar, Vector2

# --- SPATIAL COMPONENTS ---


@dataclass(frozen=True)
class Transform:
    """
    Where a boid is and which way it is drawn.
    heading is in radians with forward along +Y.
    """

    __soa_dtype__ = [
        ("pos", "f8", (2,)),
        ("heading", "f8"),
    ]

    pos: Vector2 = Vector2(0.0, 0.0)
    heading: Scalar = 0.0


@dataclass(frozen=True)
class Velocity:
    __soa_dtype__ = [("vec", "f8", (2,))]

    vec: Vector2 = Vector2(0.0, 0.0)


# --- AGENT COMPONENTS ---


@dataclass(frozen=True)
class Boid:
    """
    Physical limits of a single flocking agent.
    """

    __soa_dtype__ = [
        ("mass", "f8"),
        ("max_speed", "f8"),
        ("max_force", "f8"),
    ]

    mass: Scalar = BOID_MASS
    max_speed: Scalar = BOID_MAX_SPEED
    max_force: Scalar = BOID_MAX_FORCE

    def __post_init__(self) -> None:
        for name in ("mass", "max_speed", "max_force"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ConfigurationError(name, f"must be positive, got {value}")


COMPONENT_TYPES = (Transform, Velocity, Boid)
