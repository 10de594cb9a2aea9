from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple, Type, TypeVar

import numpy as np

from flocking.components import COMPONENT_TYPES, Boid, Transform, Velocity
from flocking.types import EntityId, Vector2

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FlockSnapshot:
    """
    Read-only copy of every boid's kinematics, taken before any write
    of the current tick.
    """

    positions: np.ndarray  # (N, 2)
    velocities: np.ndarray  # (N, 2)

    def __post_init__(self) -> None:
        self.positions.flags.writeable = False
        self.velocities.flags.writeable = False

    def __len__(self) -> int:
        return len(self.positions)


class BoidStore:
    """
    Structure-of-arrays storage for the flock.

    Every component type owns one numpy structured array; row i of each
    array belongs to the same boid. Rows are never removed during a run.
    """

    def __init__(self, capacity: int = 100):
        self.types: List[Type[Any]] = list(COMPONENT_TYPES)
        self.entities: List[EntityId] = []
        self.arrays: Dict[Type[Any], np.ndarray] = {}
        self.capacity = max(1, capacity)
        self.count = 0

        self._next_id: int = 1
        self._rows: Dict[EntityId, int] = {}

        for t in self.types:
            self.arrays[t] = np.zeros(self.capacity, dtype=t.__soa_dtype__)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, eid: object) -> bool:
        return eid in self._rows

    # ENTITY MANAGEMENT
    def spawn(self, *components: Any) -> EntityId:
        """
        Appends a boid. Missing Transform, Velocity or Boid components
        are filled with their defaults.
        """
        data: Dict[Type[Any], Any] = {t: t() for t in self.types}
        for c in components:
            comp_type = type(c)
            if comp_type not in self.arrays:
                raise KeyError(
                    f"BoidStore cannot hold {comp_type.__name__} components."
                )
            data[comp_type] = c

        idx = self.count
        if idx >= self.capacity:
            self._resize(self.capacity * 2)

        eid = EntityId(self._next_id)
        self._next_id += 1

        self.entities.append(eid)
        self._rows[eid] = idx

        for t in self.types:
            self.arrays[t][idx] = self._pack(t, data[t])

        self.count += 1
        return eid

    def row(self, eid: EntityId) -> int:
        row = self._rows.get(eid)
        if row is None:
            raise KeyError(f"Entity {eid} does not exist.")
        return row

    # COMPONENT ACCESS
    def component(self, eid: EntityId, component_type: Type[T]) -> T:
        row = self.row(eid)
        if component_type not in self.arrays:
            raise KeyError(f"Unknown component {component_type.__name__}.")
        return self._reconstruct_component(
            component_type, self.arrays[component_type][row]
        )

    def mutate_component(self, eid: EntityId, component: Any) -> None:
        """Overwrites an existing component with a new instance."""
        row = self.row(eid)
        comp_type = type(component)
        if comp_type not in self.arrays:
            raise KeyError(
                f"Entity {eid} cannot mutate {comp_type.__name__}: "
                "Component missing."
            )
        self.arrays[comp_type][row] = self._pack(comp_type, component)

    def view(self, component_type: Type[Any]) -> np.ndarray:
        """Live structured-array view over the occupied rows."""
        return self.arrays[component_type][: self.count]

    def join(self) -> Iterator[Tuple[EntityId, Transform, Velocity, Boid]]:
        """
        Iterates boids as reconstructed dataclasses.
        Slower than the array properties; meant for inspection.
        """
        for i, eid in enumerate(self.entities):
            yield (
                eid,
                self._reconstruct_component(Transform, self.arrays[Transform][i]),
                self._reconstruct_component(Velocity, self.arrays[Velocity][i]),
                self._reconstruct_component(Boid, self.arrays[Boid][i]),
            )

    # ARRAY VIEWS
    @property
    def positions(self) -> np.ndarray:
        return self.view(Transform)["pos"]

    @property
    def headings(self) -> np.ndarray:
        return self.view(Transform)["heading"]

    @property
    def velocities(self) -> np.ndarray:
        return self.view(Velocity)["vec"]

    @property
    def masses(self) -> np.ndarray:
        return self.view(Boid)["mass"]

    @property
    def max_speeds(self) -> np.ndarray:
        return self.view(Boid)["max_speed"]

    @property
    def max_forces(self) -> np.ndarray:
        return self.view(Boid)["max_force"]

    def snapshot(self) -> FlockSnapshot:
        return FlockSnapshot(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
        )

    # INTERNAL HELPERS
    def _resize(self, new_cap: int) -> None:
        logger.debug("Growing boid store from %d to %d rows", self.capacity, new_cap)
        self.capacity = new_cap
        for t, old_arr in self.arrays.items():
            self.arrays[t] = np.zeros(new_cap, dtype=old_arr.dtype)
            self.arrays[t][: self.count] = old_arr[: self.count]

    @staticmethod
    def _pack(comp_type: Type[Any], component: Any) -> tuple:
        field_values = []
        for field_def in comp_type.__soa_dtype__:
            val = getattr(component, field_def[0])
            if isinstance(val, Vector2):
                val = tuple(val)
            field_values.append(val)
        return tuple(field_values)

    @staticmethod
    def _reconstruct_component(comp_type: Type[T], raw_data: Any) -> T:
        """Re-inflates a dataclass component from a numpy void record."""
        kwargs = {}
        for field_def in comp_type.__soa_dtype__:
            name = field_def[0]
            val = raw_data[name]
            shape = field_def[2] if len(field_def) > 2 else ()

            if shape == (2,):
                val = Vector2(float(val[0]), float(val[1]))
            else:
                val = float(val)

            kwargs[name] = val

        return comp_type(**kwargs)
