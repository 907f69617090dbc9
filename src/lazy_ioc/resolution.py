import builtins
import importlib
import inspect
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .analysis import ParameterDescriptor, describe, describe_constructor, type_name
from .bindings import ArgumentMap
from .constants import LOGGER
from .exceptions import InvalidArgumentError, UnresolvedParameterError
from .references import BoxedValue

KeyT = Union[str, type]


def normalize_arguments(args: Any) -> ArgumentMap:
    if args is None:
        return {}
    if isinstance(args, Mapping):
        out: ArgumentMap = {}
        for k, v in args.items():
            if isinstance(k, type):
                out[type_name(k)] = v
            elif isinstance(k, str) or (isinstance(k, int) and not isinstance(k, bool)):
                out[k] = v
            else:
                raise InvalidArgumentError(f"unexpected argument map key: {k!r}")
        return out
    if isinstance(args, (list, tuple)):
        return dict(enumerate(args))
    raise InvalidArgumentError(f"unexpected argument map: {args!r} - expected a mapping or a list")


def load_type(name: str) -> type:
    parts = name.split(".")
    obj: Any = None
    for cut in range(len(parts) - 1, 0, -1):
        try:
            obj = importlib.import_module(".".join(parts[:cut]))
        except (ImportError, ValueError):
            # ".Foo" or "a..b" yield empty module names
            continue
        rest = parts[cut:]
        break
    else:
        obj, rest = builtins, parts

    for attr in rest:
        obj = getattr(obj, attr, None)
        if obj is None:
            raise InvalidArgumentError(f"unable to create component: {name}")
    if not isinstance(obj, type):
        raise InvalidArgumentError(f"unable to create component: {name} (not a class)")
    return obj


class _ResolutionMixin:
    """Argument binding shared by activation, ``call()`` and ``create()``.

    Each parameter is resolved by the first rule that applies:

    1. an argument map entry keyed by the parameter name;
    2. an argument map entry keyed by the parameter's position;
    3. an argument map entry keyed by the declared type name;
    4. a component registered under the declared type name (an annotation
       that could not be evaluated also matches the one local component
       whose name ends with it);
    5. a component registered under the parameter name (safe mode only);
    6. the parameter's default value;
    7. ``None``, if the declared type is nullable.

    Anything else raises :class:`UnresolvedParameterError`. A selected
    :class:`BoxedValue` is unboxed against this container right away.
    """

    def resolve_arguments(
        self,
        parameters: Sequence[ParameterDescriptor],
        args: Optional[ArgumentMap] = None,
        safe: bool = True,
    ) -> Tuple[List[Any], Dict[str, Any]]:
        args = args or {}
        positional: List[Any] = []
        keywords: Dict[str, Any] = {}

        for param in parameters:
            value = self._resolve_parameter(param, args, safe)
            if isinstance(value, BoxedValue):
                value = value.unbox(self)
            if param.keyword_only:
                keywords[param.name] = value
            else:
                positional.append(value)

        return positional, keywords

    def _resolve_parameter(self, param: ParameterDescriptor, args: ArgumentMap, safe: bool) -> Any:
        name = param.name
        declared = param.type_name

        if name in args:
            return args[name]
        if param.index in args:
            return args[param.index]
        if declared and declared in args:
            return args[declared]
        if declared:
            key = self._type_component(param)
            if key is not None:
                return self.get(key)
        if safe and self.has(name):
            return self.get(name)
        if param.optional:
            return param.default
        if declared and param.nullable:
            return None

        raise UnresolvedParameterError(name, declared, param.declared_in)

    def _type_component(self, param: ParameterDescriptor) -> Optional[str]:
        if self.has(param.type_name):
            return param.type_name
        if param.forward_ref:
            return self._match_forward_ref(param.type_name)
        return None

    def _match_forward_ref(self, short_name: str) -> Optional[str]:
        return None

    def call(self, fn: Callable[..., Any], args: Optional[Mapping[Any, Any]] = None) -> Any:
        """Invoke any callable, resolving its arguments through the container.

        Nothing is cached: every call re-resolves the arguments.

        Args:
            fn: Any function, bound method, class or object implementing
                ``__call__``.
            args: Optional argument map (by name, position or type) or a
                list of positional arguments.

        Returns:
            The return value of *fn*.

        Raises:
            InvalidArgumentError: If *fn* is not callable.
            UnresolvedParameterError: If an argument cannot be resolved.
        """
        parameters = describe(fn)
        positional, keywords = self.resolve_arguments(parameters, normalize_arguments(args))
        return fn(*positional, **keywords)

    def create(self, target: KeyT, args: Optional[Mapping[Any, Any]] = None) -> Any:
        """Instantiate a class, resolving its constructor arguments.

        Constructor arguments are never matched against components by bare
        parameter name, only by argument map entry or by declared type.

        Args:
            target: A class, or the dotted name of one.
            args: Optional argument map for the constructor.

        Raises:
            InvalidArgumentError: If the type does not exist or is abstract.
            UnresolvedParameterError: If an argument cannot be resolved.
        """
        cls = target if isinstance(target, type) else load_type(target)

        if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
            raise InvalidArgumentError(f"unable to create instance of abstract class: {type_name(cls)}")

        parameters = describe_constructor(cls)
        positional, keywords = self.resolve_arguments(parameters, normalize_arguments(args), safe=False)
        LOGGER.debug("creating %s with %d argument(s)", type_name(cls), len(positional) + len(keywords))
        return cls(*positional, **keywords)
