# flocking/math.py
import math
from typing import Iterable

import numpy as np

from flocking.types import Scalar, Vector2

HEADING_OFFSET: Scalar = math.pi / 2


def rad_to_deg(r: Scalar) -> Scalar:
    return r * 180.0 / math.pi


# -- Vector Math --
def sum_vec(vectors: Iterable[Vector2]) -> Vector2:
    total = Vector2.zero()
    for v in vectors:
        total = total + v
    return total


def heading_from_velocity(v: Vector2) -> Scalar:
    """
    Facing angle for a sprite whose forward axis is +Y.
    Undefined for the zero vector; callers keep the previous heading.
    """
    return math.atan2(v.y, v.x) - HEADING_OFFSET


def safe_acos(cos_angle: Scalar) -> Scalar:
    """acos with the argument clamped to [-1, 1] against float drift."""
    return math.acos(max(-1.0, min(1.0, cos_angle)))


# -- Row-wise (N, 2) helpers --
def row_lengths(arr: np.ndarray) -> np.ndarray:
    """Returns an (N, 1) column of row magnitudes."""
    return np.linalg.norm(arr, axis=-1, keepdims=True)


def normalize_rows(arr: np.ndarray) -> np.ndarray:
    """
    Normalizes every row of an (..., 2) array.
    Zero-length rows stay zero instead of turning into NaN.
    """
    lengths = row_lengths(arr)
    safe = np.where(lengths > 0.0, lengths, 1.0)
    return np.where(lengths > 0.0, arr / safe, 0.0)


def clamp_rows(arr: np.ndarray, max_length: np.ndarray | Scalar) -> np.ndarray:
    """
    Clamps the magnitude of every row to max_length.
    max_length is a scalar or an (N,) / (N, 1) array.
    """
    limits = np.asarray(max_length, dtype=np.float64)
    if limits.ndim == 1:
        limits = limits[:, np.newaxis]

    lengths = row_lengths(arr)
    too_long = lengths > limits
    scale = np.where(too_long, limits / np.where(lengths > 0.0, lengths, 1.0), 1.0)
    return arr * scale
