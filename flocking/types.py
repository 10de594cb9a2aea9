# flocking/types.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator, NewType, TypeAlias

EntityId = NewType("EntityId", int)
SystemId = NewType("SystemId", str)

Scalar: TypeAlias = float


@dataclass(frozen=True, slots=True)
class Vector2:
    x: Scalar
    y: Scalar

    @staticmethod
    def zero() -> Vector2:
        return Vector2(0.0, 0.0)

    @staticmethod
    def from_angle(angle: Scalar, length: Scalar = 1.0) -> Vector2:
        return Vector2(math.cos(angle) * length, math.sin(angle) * length)

    def __iter__(self) -> Iterator[Scalar]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return 2

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: Scalar) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: Scalar) -> Vector2:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: Any) -> Vector2:
        if isinstance(scalar, (int, float)):
            if scalar == 0:
                raise ValueError(scalar)
            return Vector2(self.x / scalar, self.y / scalar)

        raise TypeError(f"other must be Scalar, not {type(scalar).__name__}")

    def length(self) -> Scalar:
        return math.hypot(self.x, self.y)

    def dot(self, other: Vector2) -> Scalar:
        return self.x * other.x + self.y * other.y

    def distance(self, other: Vector2) -> Scalar:
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalize_or_zero(self) -> Vector2:
        """Unit vector in the same direction, or the zero vector if length is 0."""
        mag = self.length()
        if mag == 0.0 or not math.isfinite(mag):
            return Vector2.zero()
        return Vector2(self.x / mag, self.y / mag)

    def clamp_length_max(self, max_length: Scalar) -> Vector2:
        mag = self.length()
        if mag > max_length and mag > 0.0:
            return self * (max_length / mag)
        return self
