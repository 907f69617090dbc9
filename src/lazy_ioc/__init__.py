# lazy_ioc/__init__.py
__version__ = "1.0.0"

from .analysis import ParameterDescriptor, component_key, describe, describe_constructor
from .api import init
from .blueprint import Blueprint
from .composite import Composite
from .config_sources import DictSource, JsonTreeSource, TreeSource, YamlTreeSource
from .container import Container
from .exceptions import (
    ConfigurationError,
    DependencyCycleError,
    InvalidArgumentError,
    LazyIocError,
    NotFoundError,
    RequirementError,
    UnresolvedParameterError,
)
from .protocols import Factory, Provider, Registry
from .references import BoxedCall, BoxedReference, BoxedValue, deferred, ref

__all__ = [
    "__version__",
    "Blueprint",
    "Container",
    "Composite",
    "init",
    "Factory",
    "Provider",
    "Registry",
    "BoxedValue",
    "BoxedReference",
    "BoxedCall",
    "ref",
    "deferred",
    "ParameterDescriptor",
    "describe",
    "describe_constructor",
    "component_key",
    "TreeSource",
    "DictSource",
    "JsonTreeSource",
    "YamlTreeSource",
    "LazyIocError",
    "NotFoundError",
    "UnresolvedParameterError",
    "DependencyCycleError",
    "ConfigurationError",
    "RequirementError",
    "InvalidArgumentError",
]
