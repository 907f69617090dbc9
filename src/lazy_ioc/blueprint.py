"""Blueprint: the mutable registry a container is built from.

Bindings, decorations, requirements and fallbacks accumulate on a
:class:`Blueprint`; :meth:`Blueprint.build` validates the requirements and
snapshots everything into a :class:`~lazy_ioc.container.Container`.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .analysis import component_key, describe
from .bindings import AliasBinding, Binding, ConstructorBinding, Decoration, FactoryBinding, ValueBinding
from .config_sources import TreeSource, flatten_tree
from .constants import LOGGER
from .container import Container
from .exceptions import ConfigurationError, InvalidArgumentError, RequirementError
from .references import BoxedCall, BoxedReference
from .resolution import normalize_arguments

KeyT = Union[str, type]


class Blueprint:
    """Accepts registrations and produces validated containers.

    Example:
        >>> bp = Blueprint()
        >>> bp.bind_value("cache_path", "/tmp/cache")
        >>> bp.bind_factory("cache", lambda cache_path: FileCache(cache_path))
        >>> bp.alias(CacheProvider, "cache")
        >>> bp.bind_factory(UserRepository)
        >>> container = bp.build()
        >>> container.get(UserRepository).cache.path
        '/tmp/cache'
    """

    def __init__(self) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._decorations: Dict[str, List[Decoration]] = {}
        self._requirements: Dict[str, List[str]] = {}
        self._provided: Dict[str, Optional[str]] = {}
        self._fallbacks: List[Any] = []

    def bind_value(self, name: KeyT, value: Any) -> None:
        """Register an eager value, replacing any earlier binding for *name*."""
        self._bindings[component_key(name)] = ValueBinding(value)

    def bind_factory(self, name: KeyT, producer: Any = None, args: Any = None) -> None:
        """Register a component that is created on first use.

        There are several valid producer shapes:

        * ``bind_factory(Foo)`` instantiates ``Foo``, resolving all of its
          constructor arguments.
        * ``bind_factory(Foo, {"bar": "x"})`` or ``bind_factory(Foo, ["x"])``
          does the same with some constructor arguments given.
        * ``bind_factory(Bar, Foo, args)`` instantiates ``Foo`` (a class or a
          dotted class name) and registers it under the name ``Bar``.
        * ``bind_factory("bar", fn, args)`` calls ``fn`` with resolved
          arguments and registers its return value.

        Argument maps may hold boxed values (see :meth:`ref`), which are
        unboxed as late as possible.

        Raises:
            InvalidArgumentError: If *producer* is none of the shapes above.
        """
        key = component_key(name)

        if producer is None or isinstance(producer, (Mapping, list, tuple)):
            if args is not None and producer is not None:
                raise InvalidArgumentError(f"unexpected argument map for component {key}: producer is already a map")
            target = name if isinstance(name, type) else key
            binding: Binding = ConstructorBinding(target, normalize_arguments(producer if producer is not None else args))
        elif isinstance(producer, (type, str)):
            binding = ConstructorBinding(producer, normalize_arguments(args))
        elif callable(producer):
            binding = FactoryBinding(producer, normalize_arguments(args))
        else:
            raise InvalidArgumentError(
                f"unexpected producer for component {key}: {type(producer).__name__} "
                "- expected a callable, a class, a class name or an argument map"
            )

        self._bindings[key] = binding

    def alias(self, new_name: KeyT, existing_name: KeyT) -> None:
        """Register *new_name* as another name for *existing_name*.

        The existing name is looked up when the alias is first used, so it
        does not need to be registered yet.
        """
        self._bindings[component_key(new_name)] = AliasBinding(component_key(existing_name))

    def decorate(self, name_or_decorator: Any, decorator_or_args: Any = None, args: Any = None) -> None:
        """Register a decorator, applied when the component is activated.

        The decorator receives the component as its first argument; any
        other parameters are resolved like :meth:`Container.call`. If it
        returns something other than ``None``, that replaces the component.

        The component name may be left out, in which case it is inferred
        from the declared type of the decorator's first parameter, or from
        that parameter's name:

            >>> bp.decorate(lambda cache_path: cache_path + "/users")
            >>> def disable(cache: MemoryCache) -> None:
            ...     cache.enabled = False
            >>> bp.decorate(disable)

        Raises:
            InvalidArgumentError: If no decorator is given, or the name
                cannot be inferred from it.
        """
        if callable(name_or_decorator) and not isinstance(name_or_decorator, type):
            decorator = name_or_decorator
            arguments = normalize_arguments(decorator_or_args)
            key = self._infer_name(decorator)
        else:
            key = component_key(name_or_decorator)
            decorator = decorator_or_args
            arguments = normalize_arguments(args)
            if not callable(decorator):
                raise InvalidArgumentError(f"unexpected decorator for component {key}: {decorator!r} - expected callable")

        self._decorations.setdefault(key, []).append(Decoration(decorator, arguments))

    @staticmethod
    def _infer_name(decorator: Callable[..., Any]) -> str:
        parameters = describe(decorator)
        if not parameters:
            raise InvalidArgumentError(
                f"unable to infer component name from {getattr(decorator, '__qualname__', decorator)!r}: "
                "it takes no parameters"
            )
        first = parameters[0]
        return first.type_name or first.name

    def require(self, name: KeyT, description: Optional[str] = None) -> None:
        """Declare that *name* must be bound or provided before ``build()``."""
        descriptions = self._requirements.setdefault(component_key(name), [])
        if description:
            descriptions.append(description)

    def provide(self, name: KeyT, description: Optional[str] = None) -> None:
        """Mark a requirement as fulfilled without binding anything.

        Raises:
            ConfigurationError: If *name* has already been provided.
        """
        key = component_key(name)
        if key in self._provided:
            raise ConfigurationError(f"requirement already provided: {key}")
        self._provided[key] = description

    def register_fallback(self, registry: Any) -> None:
        """Append a read-only registry consulted for unbound names.

        Raises:
            InvalidArgumentError: If *registry* lacks ``has()`` or ``get()``.
        """
        if not (callable(getattr(registry, "has", None)) and callable(getattr(registry, "get", None))):
            raise InvalidArgumentError(f"unexpected fallback: {registry!r} - expected has() and get()")
        self._fallbacks.append(registry)

    def has(self, name: KeyT) -> bool:
        return component_key(name) in self._bindings

    def ref(self, name: KeyT) -> BoxedReference:
        """Create a boxed reference to a component, for use in argument maps.

        The component is not activated until the argument is bound:

            >>> bp.bind_factory(FileCache, {"root_path": bp.ref("cache.path")})
        """
        return BoxedReference(name)

    def deferred(self, fn: Callable[..., Any], args: Any = None) -> BoxedCall:
        return BoxedCall(fn, args)

    def add(self, provider: Any) -> "Blueprint":
        """Apply a packaged set of bindings.

        Args:
            provider: An object with a ``register(blueprint)`` method, or a
                plain callable taking the blueprint.
        """
        register = getattr(provider, "register", None)
        if callable(register):
            register(self)
        elif callable(provider):
            provider(self)
        else:
            raise InvalidArgumentError(f"unexpected provider: {provider!r} - expected register(blueprint)")
        return self

    def load_config(self, source: TreeSource, prefix: Optional[str] = None) -> None:
        """Bind every leaf of a configuration tree as an eager value.

        Leaves are named by their dotted path, e.g. ``{"cache": {"path":
        "/tmp"}}`` binds ``"cache.path"``.
        """
        for key, value in flatten_tree(source.get_tree(), prefix).items():
            self.bind_value(key, value)

    def build(self) -> Container:
        """Validate requirements and snapshot the blueprint into a container.

        Raises:
            RequirementError: Listing every requirement that is neither
                bound nor provided.
        """
        errors: List[str] = []
        for key, descriptions in self._requirements.items():
            if key in self._bindings or key in self._provided:
                continue
            detail = f" ({'; '.join(descriptions)})" if descriptions else ""
            errors.append(f"unmet requirement: {key}{detail}")

        if errors:
            LOGGER.warning("cannot build container: %d unmet requirement(s)", len(errors))
            raise RequirementError(errors)

        values: Dict[str, Any] = {}
        bindings: Dict[str, Binding] = {}
        for key, binding in self._bindings.items():
            if isinstance(binding, ValueBinding):
                values[key] = binding.value
            else:
                bindings[key] = binding

        container = Container(
            values=values,
            bindings=bindings,
            decorations=self._decorations,
            fallbacks=self._fallbacks,
        )
        LOGGER.debug(
            "built container: %d binding(s), %d value(s), %d fallback(s)",
            len(bindings), len(values), len(self._fallbacks),
        )
        return container
