from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

from flocking.core.store import BoidStore

T = TypeVar("T")


class World:
    """
    The flock plus the global resources systems read each tick
    (settings, bounds, goal, time).
    """

    def __init__(self, store: BoidStore | None = None) -> None:
        self.store = store if store is not None else BoidStore()
        self._resources: Dict[Type[Any], Any] = {}

    # RESOURCE MANAGEMENT
    def add_resource(self, resource: Any) -> None:
        """Register a global resource (e.g. Time, Settings, Bounds)."""
        self._resources[type(resource)] = resource

    def get_resource(self, resource_type: Type[T]) -> T:
        """Retrieve a resource. Raises KeyError if missing."""
        res = self._resources.get(resource_type)
        if res is None:
            raise KeyError(f"Resource not found: {resource_type.__name__}")
        return res

    def try_resource(self, resource_type: Type[T]) -> T | None:
        """Retrieve a resource or returns None."""
        return self._resources.get(resource_type)

    def has_resource(self, resource_type: Type[Any]) -> bool:
        return resource_type in self._resources

    def mutate_resource(self, resource: Any) -> None:
        """Replace an EXISTING resource with a new instance."""
        res_type = type(resource)

        if res_type not in self._resources:
            raise KeyError(
                f"Resource {res_type.__name__} does not exist. "
                "Use world.add_resource() to initialize global state."
            )

        self._resources[res_type] = resource

    def remove_resource(self, resource_type: Type[Any]) -> None:
        self._resources.pop(resource_type, None)
