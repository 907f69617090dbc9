"""Boxed values: deferred arguments unboxed at argument-binding time.

A boxed value placed in an argument map is not looked at when it is
registered. The resolver unboxes it against the container at the moment the
argument is bound, which lets a binding reference a component that has not
been registered yet, and avoids activating dependencies that are never used.
"""

from typing import Any, Callable, Mapping, Optional, Union

KeyT = Union[str, type]


class BoxedValue:
    """Base class for values that are unboxed as late as possible."""

    def unbox(self, container: Any) -> Any:
        """Return the value this box stands for.

        Args:
            container: The container the argument is being resolved against.

        Raises:
            NotImplementedError: Always (must be overridden by subclasses).
        """
        raise NotImplementedError


class BoxedReference(BoxedValue):
    """A reference to a named component.

    Args:
        name: The component name (or type) to look up on unboxing.

    Example:
        >>> blueprint.bind_factory(UserRepository, {"cache": BoxedReference("cache")})
    """

    __slots__ = ("name",)

    def __init__(self, name: KeyT):
        self.name = name

    def unbox(self, container: Any) -> Any:
        return container.get(self.name)

    def __repr__(self) -> str:
        return f"BoxedReference({self.name!r})"


class BoxedCall(BoxedValue):
    """A nested value-producer: a callable invoked through the container.

    Args:
        fn: Any callable; its own parameters are resolved like ``call()``.
        args: Optional argument map for *fn*.
    """

    __slots__ = ("fn", "args")

    def __init__(self, fn: Callable[..., Any], args: Optional[Mapping[Any, Any]] = None):
        self.fn = fn
        self.args = args

    def unbox(self, container: Any) -> Any:
        return container.call(self.fn, self.args)

    def __repr__(self) -> str:
        return f"BoxedCall({getattr(self.fn, '__qualname__', self.fn)!r})"


def ref(name: KeyT) -> BoxedReference:
    return BoxedReference(name)


def deferred(fn: Callable[..., Any], args: Optional[Mapping[Any, Any]] = None) -> BoxedCall:
    return BoxedCall(fn, args)
