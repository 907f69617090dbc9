"""Binding variants and decoration entries.

A component name carries at most one binding at a time. The binding is the
recorded recipe for the component's value; the container picks it apart by
variant at activation time.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Union

ArgumentMap = Dict[Union[str, int], Any]


@dataclass(frozen=True)
class ValueBinding:
    """An eager value, registered as-is."""

    value: Any


@dataclass(frozen=True)
class FactoryBinding:
    """A creation function invoked through the resolver on first use.

    Attributes:
        fn: The creation function.
        arguments: Normalised argument map for *fn*.
    """

    fn: Callable[..., Any]
    arguments: ArgumentMap = field(default_factory=dict)


@dataclass(frozen=True)
class ConstructorBinding:
    """A type instantiated through the constructor path on first use.

    Attributes:
        target: A class, or the dotted name of one.
        arguments: Normalised argument map for the constructor.
    """

    target: Union[type, str]
    arguments: ArgumentMap = field(default_factory=dict)


@dataclass(frozen=True)
class AliasBinding:
    """Forwards resolution to another component name at activation time."""

    target: str


Binding = Union[ValueBinding, FactoryBinding, ConstructorBinding, AliasBinding]


@dataclass(frozen=True)
class Decoration:
    """A post-construction hook for a component.

    The decorator receives the component's current value as its first
    argument. Returning anything other than ``None`` replaces the value.
    """

    decorator: Callable[..., Any]
    arguments: ArgumentMap = field(default_factory=dict)
