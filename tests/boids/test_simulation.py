import math

import numpy as np
import pytest

from flocking.boids.simulation import advance, advance_reference, max_speed_violation
from flocking.components import Boid
from flocking.core.store import BoidStore
from flocking.errors import ConfigurationError
from flocking.resources import BoidSettings, BoundaryPolicy, SteeringMode, WorldBounds
from flocking.types import Vector2
from tests.conftest import make_store

DT = 1.0 / 60.0


def _copy_store(store: BoidStore) -> BoidStore:
    states = [(tuple(p), tuple(v)) for p, v in zip(store.positions, store.velocities)]
    copy = make_store(states, boid=Boid(
        mass=float(store.masses[0]),
        max_speed=float(store.max_speeds[0]),
        max_force=float(store.max_forces[0]),
    ))
    copy.headings[:] = store.headings
    return copy


@pytest.mark.parametrize("policy", list(BoundaryPolicy))
@pytest.mark.parametrize("mode", list(SteeringMode))
def test_speed_never_exceeds_max(crowded_flock, policy, mode):
    store = crowded_flock()
    settings = BoidSettings(boundary=policy, steering_mode=mode)
    bounds = WorldBounds(width=200.0, height=200.0)

    for _ in range(120):
        advance(store, DT, settings, bounds, goal=Vector2(30.0, -20.0))
        assert max_speed_violation(store) <= 1e-9


@pytest.mark.parametrize(
    "policy, mode, goal",
    [
        (BoundaryPolicy.WRAP, SteeringMode.WEIGHTED_SUM, None),
        (BoundaryPolicy.SOFT_REPULSION, SteeringMode.WEIGHTED_SUM, Vector2(40.0, 10.0)),
        (BoundaryPolicy.WRAP, SteeringMode.DESIRED_VELOCITY, Vector2(-60.0, 0.0)),
        (BoundaryPolicy.SOFT_REPULSION, SteeringMode.DESIRED_VELOCITY, None),
    ],
)
def test_vectorized_tick_matches_reference(crowded_flock, policy, mode, goal):
    fast = crowded_flock()
    slow = _copy_store(fast)
    settings = BoidSettings(boundary=policy, steering_mode=mode, goal_arrival_radius=40.0)
    bounds = WorldBounds(width=200.0, height=200.0)

    for _ in range(5):
        advance(fast, DT, settings, bounds, goal)
        advance_reference(slow, DT, settings, bounds, goal)

    np.testing.assert_allclose(fast.positions, slow.positions, atol=1e-9)
    np.testing.assert_allclose(fast.velocities, slow.velocities, atol=1e-9)
    np.testing.assert_allclose(fast.headings, slow.headings, atol=1e-9)


def test_storage_order_does_not_bias_the_tick(crowded_flock):
    store = crowded_flock(count=25, seed=3)
    states = [(tuple(p), tuple(v)) for p, v in zip(store.positions, store.velocities)]
    perm = np.random.default_rng(11).permutation(len(states))

    boid = Boid(mass=1.5, max_speed=80.0, max_force=300.0)
    in_order = make_store(states, boid=boid)
    shuffled = make_store([states[i] for i in perm], boid=boid)

    settings = BoidSettings(steering_mode=SteeringMode.DESIRED_VELOCITY)
    bounds = WorldBounds(width=200.0, height=200.0)
    advance(in_order, DT, settings, bounds)
    advance(shuffled, DT, settings, bounds)

    np.testing.assert_allclose(shuffled.positions, in_order.positions[perm], atol=1e-12)
    np.testing.assert_allclose(shuffled.velocities, in_order.velocities[perm], atol=1e-12)


def test_lonely_boid_seeks_goal_and_arrives():
    store = make_store(
        [((0, 0), (0, 0))], boid=Boid(mass=1.0, max_speed=100.0, max_force=1000.0)
    )
    settings = BoidSettings(goal_attraction_weight=1.0, goal_arrival_radius=30.0)
    bounds = WorldBounds()
    goal = Vector2(100.0, 0.0)

    advance(store, 0.01, settings, bounds, goal)

    # steering (100, 0), mass 1: one 0.01s step gives velocity (1, 0)
    np.testing.assert_allclose(store.velocities[0], [1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(store.positions[0], [0.01, 0.0], atol=1e-12)

    last_speed = 1.0
    approaching = True
    for _ in range(1200):
        distance = math.dist(store.positions[0], tuple(goal))
        approaching = approaching and distance > 30.0
        advance(store, DT, settings, bounds, goal)
        speed = float(np.linalg.norm(store.velocities[0]))
        if approaching:
            assert speed >= last_speed
        assert speed <= 100.0 + 1e-9
        last_speed = speed

    assert math.dist(store.positions[0], tuple(goal)) < 1.0
    assert abs(store.positions[0][1]) < 1e-9
    assert last_speed < 10.0


def test_no_goal_means_no_goal_force():
    store = make_store([((0, 0), (20, 0))])
    settings = BoidSettings()

    advance(store, DT, settings, WorldBounds(), goal=None)

    np.testing.assert_allclose(store.velocities[0], [20.0, 0.0])


def test_zero_delta_changes_nothing(crowded_flock):
    store = crowded_flock()
    before = store.positions.copy()

    advance(store, 0.0, BoidSettings(), WorldBounds(width=200.0, height=200.0))

    np.testing.assert_array_equal(store.positions, before)


def test_negative_delta_is_rejected(store):
    with pytest.raises(ValueError):
        advance(store, -0.1, BoidSettings(), WorldBounds())


def test_empty_store_is_a_no_op(store):
    assert advance(store, DT, BoidSettings(), WorldBounds()) is store


def test_bad_settings_edit_fails_before_any_write():
    store = make_store([((0, 0), (10, 0))])
    settings = BoidSettings()
    settings.goal_arrival_radius = 0.0

    with pytest.raises(ConfigurationError):
        advance(store, DT, settings, WorldBounds(), goal=Vector2(50.0, 0.0))

    np.testing.assert_array_equal(store.positions[0], [0.0, 0.0])


def test_resize_only_affects_future_wrap_checks():
    store = make_store([((300, 0), (0, 0))])
    settings = BoidSettings()
    bounds = WorldBounds(width=700.0, height=700.0)

    bounds.width = 400.0
    np.testing.assert_array_equal(store.positions[0], [300.0, 0.0])

    advance(store, DT, settings, bounds)

    np.testing.assert_array_equal(store.positions[0], [-200.0, 0.0])


def test_wrap_after_integration():
    store = make_store([((349.9, 5.0), (60, 0))])

    advance(store, 0.1, BoidSettings(), WorldBounds(width=700.0, height=700.0))

    assert store.positions[0][0] == -350.0
    assert store.positions[0][1] == 5.0


def test_boundary_edited_as_string_still_wraps():
    store = make_store([((349.9, 5.0), (60, 0))])
    settings = BoidSettings(boundary=BoundaryPolicy.SOFT_REPULSION)
    settings.boundary = "wrap"

    advance(store, 0.1, settings, WorldBounds(width=700.0, height=700.0))

    assert store.positions[0][0] == -350.0
    assert settings.boundary is BoundaryPolicy.WRAP


def test_boundary_edited_as_string_still_repels():
    store = make_store([((-345.0, 0.0), (0, 0))])
    settings = BoidSettings()
    settings.boundary = "soft_repulsion"

    advance(store, 0.1, settings, WorldBounds(width=700.0, height=700.0))

    # (1 - 5/50) * 500 pushed for 0.1s
    np.testing.assert_allclose(store.velocities[0], [45.0, 0.0])


def test_steering_mode_edited_as_string_takes_effect():
    store = make_store([((0, 0), (10, 0))])
    settings = BoidSettings()
    settings.steering_mode = "desired_velocity"

    advance(store, 0.1, settings, WorldBounds())

    np.testing.assert_allclose(store.velocities[0], [9.0, 0.0])


def test_unknown_boundary_is_a_configuration_error():
    store = make_store([((0, 0), (10, 0))])
    settings = BoidSettings()
    settings.boundary = "bounce"

    with pytest.raises(ConfigurationError) as exc:
        advance(store, DT, settings, WorldBounds())

    assert exc.value.param_name == "boundary"
    np.testing.assert_array_equal(store.positions[0], [0.0, 0.0])
