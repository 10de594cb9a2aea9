import numpy as np
import pytest

from flocking.boids.spawn import spawn_boid, spawn_flock
from flocking.components import Boid
from flocking.core.store import BoidStore
from flocking.core.world import World
from flocking.resources import BoidSettings, WorldBounds
from flocking.types import Vector2


def make_store(states, boid=None) -> BoidStore:
    """Builds a store from [(position, velocity), ...] tuples."""
    store = BoidStore()
    for pos, vel in states:
        spawn_boid(store, position=Vector2(*pos), velocity=Vector2(*vel), boid=boid)
    return store


@pytest.fixture
def world():
    """Returns a fresh World instance for each test."""
    return World()


@pytest.fixture
def store():
    return BoidStore()


@pytest.fixture
def settings():
    return BoidSettings()


@pytest.fixture
def bounds():
    return WorldBounds()


@pytest.fixture
def crowded_flock():
    """Factory for a dense, seeded flock where most boids have neighbors."""

    def _make(count: int = 40, seed: int = 7) -> BoidStore:
        store = BoidStore()
        spawn_flock(
            store,
            WorldBounds(width=200.0, height=200.0),
            count=count,
            rng=np.random.default_rng(seed),
            boid=Boid(mass=1.5, max_speed=80.0, max_force=300.0),
        )
        return store

    return _make
