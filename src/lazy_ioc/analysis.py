import inspect
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union, get_args, get_origin, Annotated

from .exceptions import InvalidArgumentError

KeyT = Union[str, type]

_EMPTY = inspect.Parameter.empty
_NONE_TYPE = type(None)


@dataclass(frozen=True)
class ParameterDescriptor:
    name: str
    index: int
    type_name: Optional[str] = None
    optional: bool = False
    default: Any = None
    nullable: bool = False
    keyword_only: bool = False
    declared_in: str = "<unknown>"
    forward_ref: bool = False


def type_name(t: type) -> str:
    module = getattr(t, "__module__", None)
    qualname = getattr(t, "__qualname__", None) or getattr(t, "__name__", str(t))
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


def component_key(name: KeyT) -> str:
    if isinstance(name, str):
        return name
    if isinstance(name, type):
        return type_name(name)
    raise InvalidArgumentError(f"component name must be a string or a type, got: {name!r}")


def location_of(fn: Any) -> str:
    target = inspect.unwrap(fn) if callable(fn) else fn
    qualname = getattr(target, "__qualname__", None) or type(target).__qualname__
    try:
        filename = inspect.getsourcefile(target) or "<unknown>"
        line = inspect.getsourcelines(target)[1]
    except (OSError, TypeError):
        return qualname
    return f"{qualname} in file: {filename}, line {line}"


def _split_forward_ref(text: str) -> Tuple[Optional[str], bool]:
    text = text.strip().strip("'\"")
    nullable = False
    if text.startswith("Optional[") and text.endswith("]"):
        text, nullable = text[len("Optional["):-1].strip(), True
    parts = [p.strip() for p in text.split("|")]
    if "None" in parts:
        nullable = True
        parts = [p for p in parts if p != "None"]
    if len(parts) != 1 or not parts[0]:
        return None, nullable
    return parts[0], nullable


def _split_annotation(ann: Any) -> Tuple[Optional[str], bool]:
    if ann is _EMPTY or ann is Any or ann is None or ann is _NONE_TYPE:
        return None, False

    if isinstance(ann, typing.ForwardRef):
        ann = ann.__forward_arg__

    if isinstance(ann, str):
        return _split_forward_ref(ann)

    origin = get_origin(ann)

    if origin is Annotated:
        return _split_annotation(get_args(ann)[0])

    if origin is Union or origin is types.UnionType:
        members = get_args(ann)
        nullable = _NONE_TYPE in members
        rest = [m for m in members if m is not _NONE_TYPE]
        if len(rest) == 1:
            name, _ = _split_annotation(rest[0])
            return name, nullable
        return None, nullable

    if isinstance(ann, type):
        return type_name(ann), False

    if isinstance(origin, type):
        return type_name(origin), False

    return None, False


def _hint_target(fn: Any) -> Any:
    if inspect.isclass(fn):
        return fn.__init__
    if inspect.isfunction(fn) or inspect.ismethod(fn):
        return fn
    return getattr(type(fn), "__call__", fn)


def _type_hints(target: Any) -> dict:
    try:
        return typing.get_type_hints(target, include_extras=True)
    except Exception:
        return {}


def _globals_of(target: Any) -> dict:
    namespace = getattr(inspect.unwrap(target), "__globals__", None)
    if namespace is not None:
        return namespace
    module = sys.modules.get(getattr(target, "__module__", None) or "")
    return vars(module) if module is not None else {}


def _evaluate(target: Any, name: str, ann: Any) -> Any:
    # one annotation at a time, so a single unresolvable name keeps its raw string
    if not isinstance(ann, str):
        return ann

    def shim():
        pass

    shim.__annotations__ = {name: ann}
    try:
        return typing.get_type_hints(shim, globalns=_globals_of(target), include_extras=True)[name]
    except Exception:
        return ann


def _describe(fn: Any, sig: inspect.Signature, declared_in: str) -> Tuple[ParameterDescriptor, ...]:
    target = _hint_target(fn)
    hints = _type_hints(target)
    plan: List[ParameterDescriptor] = []

    index = 0
    for name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        ann = hints[name] if name in hints else _evaluate(target, name, param.annotation)
        declared, nullable = _split_annotation(ann)
        optional = param.default is not _EMPTY

        plan.append(
            ParameterDescriptor(
                name=name,
                index=index,
                type_name=declared,
                optional=optional,
                default=param.default if optional else None,
                nullable=nullable,
                keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
                declared_in=declared_in,
                forward_ref=declared is not None and isinstance(ann, (str, typing.ForwardRef)),
            )
        )
        index += 1

    return tuple(plan)


def describe(fn: Callable[..., Any]) -> Tuple[ParameterDescriptor, ...]:
    if not callable(fn):
        raise InvalidArgumentError(f"unexpected value: {fn!r} - expected callable")
    try:
        sig = inspect.signature(fn)
    except (ValueError, TypeError):
        return ()
    return _describe(fn, sig, location_of(fn))


def describe_constructor(cls: type) -> Tuple[ParameterDescriptor, ...]:
    if not isinstance(cls, type):
        raise InvalidArgumentError(f"unexpected value: {cls!r} - expected a class")
    init = cls.__init__
    if init is object.__init__:
        return ()
    try:
        sig = inspect.signature(init)
    except (ValueError, TypeError):
        return ()
    params = list(sig.parameters.values())[1:]
    return _describe(init, sig.replace(parameters=params), location_of(init))
