"""Exception hierarchy for lazy-ioc.

All package-specific exceptions inherit from :class:`LazyIocError`, making it
easy to catch any lazy-ioc error with a single ``except LazyIocError`` clause.
"""

from typing import Any, Optional, Sequence

from .constants import CYCLE_SEPARATOR


class LazyIocError(Exception):
    """Base exception for all lazy-ioc errors."""

    pass


class NotFoundError(LazyIocError):
    """Raised when no binding and no fallback satisfies a component name.

    Attributes:
        key: The component name that was not found.
    """

    def __init__(self, key: Any):
        super().__init__(f"undefined component: {key}")
        self.key = key


class UnresolvedParameterError(LazyIocError):
    """Raised when the resolver exhausts every rule for a single parameter.

    Attributes:
        parameter: The parameter name.
        type_name: The declared type name of the parameter, if any.
        location: Human-readable location of the declaring function.
    """

    def __init__(self, parameter: str, type_name: Optional[str], location: str):
        type_part = f" ({type_name})" if type_name else ""
        super().__init__(f"unable to resolve parameter: '{parameter}'{type_part} in {location}")
        self.parameter = parameter
        self.type_name = type_name
        self.location = location


class DependencyCycleError(LazyIocError):
    """Raised when activation re-enters a name that is already activating.

    Attributes:
        chain: The component names in activation order, closed by the name
            that was requested again.
        path: The chain rendered as ``a -> b -> a``.
    """

    def __init__(self, chain: Sequence[str]):
        self.chain = tuple(chain)
        self.path = CYCLE_SEPARATOR.join(self.chain)
        super().__init__(f"dependency cycle detected: {self.path}")


class ConfigurationError(LazyIocError):
    """Raised for blueprint-time contract violations."""

    def __init__(self, msg: str):
        super().__init__(msg)


class RequirementError(ConfigurationError):
    """Raised by ``Blueprint.build()`` when requirements are not met.

    Attributes:
        errors: One human-readable line per unmet requirement.
    """

    def __init__(self, errors: list[str]):
        super().__init__("Unmet requirements:\n" + "\n".join(f"- {e}" for e in errors))
        self.errors = errors


class InvalidArgumentError(LazyIocError, ValueError):
    """Raised for malformed input to a structural operation.

    Examples are unknown or abstract types passed to ``create()``, values
    that are not callable, or producers of an unrecognised shape.
    """

    def __init__(self, msg: str):
        super().__init__(msg)
