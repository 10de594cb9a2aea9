import math

import numpy as np
import pytest

from flocking.errors import ConfigurationError, FlockingError
from flocking.math import (
    clamp_rows,
    heading_from_velocity,
    normalize_rows,
    safe_acos,
    sum_vec,
)
from flocking.types import Vector2


def test_normalize_rows_keeps_zero_rows_zero():
    rows = normalize_rows(np.array([[3.0, 4.0], [0.0, 0.0]]))

    np.testing.assert_allclose(rows, [[0.6, 0.8], [0.0, 0.0]])
    assert not np.isnan(rows).any()


def test_clamp_rows_with_per_row_limits():
    rows = np.array([[30.0, 40.0], [3.0, 4.0], [0.0, 0.0]])

    clamped = clamp_rows(rows, np.array([10.0, 10.0, 1.0]))

    np.testing.assert_allclose(clamped, [[6.0, 8.0], [3.0, 4.0], [0.0, 0.0]])


def test_clamp_rows_with_scalar_limit():
    clamped = clamp_rows(np.array([[0.0, -20.0]]), 5.0)

    np.testing.assert_allclose(clamped, [[0.0, -5.0]])


def test_heading_is_zero_when_flying_up():
    assert heading_from_velocity(Vector2(0.0, 1.0)) == pytest.approx(0.0)
    assert heading_from_velocity(Vector2(1.0, 0.0)) == pytest.approx(-math.pi / 2)


def test_safe_acos_tolerates_drift():
    assert safe_acos(1.0000000002) == 0.0
    assert safe_acos(-1.0000000002) == pytest.approx(math.pi)


def test_sum_vec():
    assert sum_vec([Vector2(1.0, 2.0), Vector2(-3.0, 0.5)]) == Vector2(-2.0, 2.5)
    assert sum_vec([]) == Vector2(0.0, 0.0)


def test_vector_normalize_or_zero():
    assert Vector2(0.0, 0.0).normalize_or_zero() == Vector2(0.0, 0.0)
    assert Vector2(0.0, -2.0).normalize_or_zero() == Vector2(0.0, -1.0)


def test_vector_clamp_length_max():
    assert Vector2(6.0, 8.0).clamp_length_max(5.0) == Vector2(3.0, 4.0)
    assert Vector2(1.0, 0.0).clamp_length_max(5.0) == Vector2(1.0, 0.0)


def test_vector_division_by_zero():
    with pytest.raises(ValueError):
        Vector2(1.0, 1.0) / 0


def test_configuration_error_message():
    err = ConfigurationError("view_angle", "must be within [0, 2*pi]")

    assert isinstance(err, FlockingError)
    assert err.param_name == "view_angle"
    assert str(err) == "Invalid configuration for 'view_angle': must be within [0, 2*pi]"
