"""Runtime container: lazy activation of components.

A :class:`Container` is built from a :class:`~lazy_ioc.blueprint.Blueprint`
and never changes its bindings afterwards. Each component name moves through
``Bound -> Activating -> Active``; once active its value is cached and
returned as-is on every later ``get()``.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from .analysis import component_key, type_name
from .bindings import AliasBinding, Binding, ConstructorBinding, Decoration, FactoryBinding, ValueBinding
from .constants import LOGGER
from .exceptions import DependencyCycleError, InvalidArgumentError, NotFoundError
from .protocols import Factory, Registry
from .references import BoxedReference
from .resolution import _ResolutionMixin

KeyT = Union[str, type]


class Container(_ResolutionMixin):
    """Lazily-activating view over a blueprint's bindings.

    Args:
        values: Eager values by component name.
        bindings: Lazy bindings (factory, constructor or alias) by name.
        decorations: Decoration entries by name, in registration order.
        fallbacks: Read-only registries consulted for unbound names.

    The container is not thread-safe: the activation stack used for cycle
    detection belongs to one resolution context at a time.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        bindings: Optional[Mapping[str, Binding]] = None,
        decorations: Optional[Mapping[str, Iterable[Decoration]]] = None,
        fallbacks: Iterable[Registry] = (),
    ) -> None:
        self._values: Dict[str, Any] = dict(values or {})
        self._bindings: Dict[str, Binding] = dict(bindings or {})
        self._decorations: Dict[str, List[Decoration]] = {k: list(v) for k, v in (decorations or {}).items()}
        self._fallbacks: List[Registry] = list(fallbacks)
        self._active: Set[str] = set()
        self._activating: Dict[str, int] = {}

        for key in {type_name(Container), type_name(type(self)), type_name(Factory)}:
            if key in self._values or key in self._bindings:
                LOGGER.debug("keeping user binding for '%s' over self-registration", key)
                continue
            self._values[key] = self
            self._active.add(key)

    def has(self, name: KeyT) -> bool:
        key = component_key(name)
        if key in self._values or key in self._bindings:
            return True
        return any(fallback.has(key) for fallback in self._fallbacks)

    def is_active(self, name: KeyT) -> bool:
        return component_key(name) in self._active

    def get(self, name: KeyT) -> Any:
        """Return the value of a component, activating it on first use.

        Args:
            name: The component name, or a type registered by its name.

        Returns:
            The cached component value.

        Raises:
            NotFoundError: If nothing binds *name*.
            DependencyCycleError: If *name* is already being activated
                further up the current call tree.
        """
        key = component_key(name)

        if key in self._active:
            return self._values[key]

        if key in self._activating:
            chain = sorted(self._activating, key=self._activating.__getitem__) + [key]
            error = DependencyCycleError(chain)
            LOGGER.warning("%s", error)
            raise error

        if key not in self._bindings and key not in self._values and key not in self._decorations:
            return self._from_fallbacks(key)

        self._activating[key] = len(self._activating)
        try:
            value = self._activate(key)
            for decoration in self._decorations.get(key, ()):
                value = self._decorate(key, decoration, value)
            self._values[key] = value
            self._active.add(key)
            LOGGER.debug("activated component '%s'", key)
        finally:
            del self._activating[key]

        return value

    def _activate(self, key: str) -> Any:
        binding = self._bindings.get(key)

        if binding is None:
            if key in self._values:
                return self._values[key]
            return self._from_fallbacks(key)

        LOGGER.debug("activating component '%s' via %s", key, type(binding).__name__)
        if isinstance(binding, FactoryBinding):
            return self.call(binding.fn, binding.arguments)
        if isinstance(binding, ConstructorBinding):
            return self.create(binding.target, binding.arguments)
        if isinstance(binding, AliasBinding):
            return self.get(binding.target)
        if isinstance(binding, ValueBinding):
            return binding.value
        raise InvalidArgumentError(f"unexpected binding for component {key}: {binding!r}")

    def _from_fallbacks(self, key: str) -> Any:
        # the fallback owns the value; nothing is cached or marked active here
        for fallback in self._fallbacks:
            if fallback.has(key):
                LOGGER.debug("component '%s' supplied by fallback %r", key, fallback)
                return fallback.get(key)
        raise NotFoundError(key)

    def _match_forward_ref(self, short_name: str) -> Optional[str]:
        suffix = "." + short_name
        matches = [k for k in (*self._values, *self._bindings) if k.endswith(suffix)]
        if len(matches) == 1:
            LOGGER.debug("matched annotation '%s' to component '%s'", short_name, matches[0])
            return matches[0]
        return None

    def _decorate(self, key: str, decoration: Decoration, value: Any) -> Any:
        arguments = dict(decoration.arguments)
        arguments.setdefault(0, value)
        result = self.call(decoration.decorator, arguments)
        LOGGER.debug(
            "decorated component '%s' with %s%s",
            key,
            getattr(decoration.decorator, "__qualname__", decoration.decorator),
            "" if result is None else " (replaced)",
        )
        return value if result is None else result

    def inject(self, name: KeyT, value: Any) -> None:
        """Add an active component at runtime.

        Raises:
            InvalidArgumentError: If *name* is already known to this
                container or any of its fallbacks.
        """
        key = component_key(name)
        if self.has(key):
            raise InvalidArgumentError(f"attempted override of component: {key}")
        self._values[key] = value
        self._active.add(key)

    def ref(self, name: KeyT) -> BoxedReference:
        return BoxedReference(name)

    def __repr__(self) -> str:
        return f"<Container bindings={len(self._bindings)} values={len(self._values)} active={len(self._active)}>"
