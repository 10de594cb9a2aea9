from __future__ import annotations

import logging
from enum import Enum, auto
from graphlib import CycleError, TopologicalSorter
from typing import Callable, Dict, List, Union

from flocking.core.world import World
from flocking.types import SystemId

logger = logging.getLogger(__name__)


class Stage(Enum):
    STARTUP = auto()  # Run once before the first tick
    INPUT = auto()  # Resolve host input (goal point, settings edits)
    UPDATE = auto()  # Read phase: forces from the snapshot
    PHYSICS = auto()  # Write phase: integration
    POST_UPDATE = auto()  # Boundary handling, bookkeeping


TICK_STAGES = (Stage.INPUT, Stage.UPDATE, Stage.PHYSICS, Stage.POST_UPDATE)

SystemFn = Callable[[World], None]


class Scheduler:
    def __init__(self):
        self._registered_systems: List[dict] = []

        self._execution_order: Dict[Stage, List[SystemFn]] = {
            s: [] for s in Stage
        }
        self._is_compiled = False
        self._startup_done = False

    def add_system(
        self,
        stage: Stage,
        system: SystemFn,
        name: Union[SystemId, None] = None,
        before: Union[SystemId, List[SystemId], None] = None,
        after: Union[SystemId, List[SystemId], None] = None,
    ) -> None:
        """Register a simple function as a system."""
        if self._is_compiled:
            raise RuntimeError("Cannot add systems after scheduler is compiled.")

        sys_name = name or SystemId(getattr(system, "__name__"))

        before_deps = [before] if isinstance(before, str) else (before or [])
        after_deps = [after] if isinstance(after, str) else (after or [])

        self._registered_systems.append(
            {
                "stage": stage,
                "func": system,
                "name": sys_name,
                "before": before_deps,
                "after": after_deps,
            }
        )

    def compile(self) -> None:
        by_stage: Dict[Stage, List[dict]] = {s: [] for s in Stage}
        for entry in self._registered_systems:
            by_stage[entry["stage"]].append(entry)

        for stage, entries in by_stage.items():
            sorter: TopologicalSorter = TopologicalSorter()
            name_map = {}

            for entry in entries:
                name_map[entry["name"]] = entry["func"]
                sorter.add(entry["name"], *entry["after"])

            for entry in entries:
                for successor in entry["before"]:
                    sorter.add(successor, entry["name"])

            try:
                sorted_names = list(sorter.static_order())
            except CycleError as e:
                raise RuntimeError(
                    f"Cycle detected in stage {stage.name}: {e.args[1]}"
                ) from e

            self._execution_order[stage] = [
                name_map[name] for name in sorted_names if name in name_map
            ]

        logger.debug(
            "Compiled schedule: %s",
            {
                s.name: [f.__name__ for f in fns]
                for s, fns in self._execution_order.items()
                if fns
            },
        )
        self._is_compiled = True

    def run_stage(self, stage: Stage, world: World) -> None:
        if not self._is_compiled:
            self.compile()

        for system in self._execution_order[stage]:
            system(world)

    def run_tick(self, world: World) -> None:
        """Runs STARTUP once, then every per-tick stage in order."""
        if not self._startup_done:
            self.run_stage(Stage.STARTUP, world)
            self._startup_done = True

        for stage in TICK_STAGES:
            self.run_stage(stage, world)

    def systems(self, stage: Stage) -> List[SystemFn]:
        if not self._is_compiled:
            self.compile()
        return list(self._execution_order[stage])

    def clear(self) -> None:
        self._registered_systems.clear()
        for stage in Stage:
            self._execution_order[stage].clear()

        self._is_compiled = False
        self._startup_done = False
