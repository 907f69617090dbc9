"""Composite registry delegating look-ups to a prioritised list of registries."""

from typing import Any, Iterable, List

from .analysis import component_key
from .exceptions import NotFoundError
from .protocols import Registry


class Composite:
    """Read-only registry over several others, queried in order.

    Useful as a single fallback that merges a number of registries, for
    example a parent container and a plain mapping adapter.

    Args:
        registries: Registries exposing ``has()`` and ``get()``; earlier
            entries win.
    """

    def __init__(self, registries: Iterable[Registry]):
        self._registries: List[Registry] = list(registries)

    def has(self, name: Any) -> bool:
        key = component_key(name)
        return any(r.has(key) for r in self._registries)

    def get(self, name: Any) -> Any:
        key = component_key(name)
        for registry in self._registries:
            if registry.has(key):
                return registry.get(key)
        raise NotFoundError(key)
