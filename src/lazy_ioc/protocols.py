"""Contracts consumed and implemented by lazy-ioc."""

from typing import Any, Callable, Mapping, Optional, Protocol, Union, runtime_checkable

KeyT = Union[str, type]


@runtime_checkable
class Registry(Protocol):
    """Read-only registry contract, used for fallbacks."""

    def has(self, name: Any) -> bool: ...

    def get(self, name: Any) -> Any: ...


@runtime_checkable
class Provider(Protocol):
    """A reusable set of bindings applied to a blueprint."""

    def register(self, blueprint: Any) -> None: ...


@runtime_checkable
class Factory(Protocol):
    """The factory aspect of a container.

    Type-hint against this contract when all a component needs is the
    ability to call and create things through the container.
    """

    def call(self, fn: Callable[..., Any], args: Optional[Mapping[Any, Any]] = None) -> Any: ...

    def create(self, target: KeyT, args: Optional[Mapping[Any, Any]] = None) -> Any: ...

    def ref(self, name: KeyT) -> Any: ...
