import logging
from typing import Any, Dict, Iterable, Optional, Union

from .blueprint import Blueprint
from .config_sources import TreeSource
from .constants import LOGGER
from .container import Container

KeyT = Union[str, type]


def init(
    *providers: Any,
    values: Optional[Dict[KeyT, Any]] = None,
    config: Optional[TreeSource] = None,
    config_prefix: Optional[str] = None,
    fallbacks: Iterable[Any] = (),
    overrides: Optional[Dict[KeyT, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> Container:
    """Assemble a blueprint from providers and build a container.

    Registration order is: configuration tree, explicit *values*, providers
    (in the order given), then *overrides*, so overrides always win.

    Args:
        *providers: Objects with ``register(blueprint)``, or callables
            taking the blueprint.
        values: Eager values bound before the providers run.
        config: Optional configuration tree whose leaves are bound as
            dotted names.
        config_prefix: Prefix for the configuration names.
        fallbacks: Read-only registries consulted for unbound names.
        overrides: Eager values bound after the providers run.
        logger: Logger for bootstrap diagnostics (defaults to the package
            logger).
    """
    log = logger or LOGGER
    blueprint = Blueprint()

    if config is not None:
        blueprint.load_config(config, config_prefix)
    for k, v in (values or {}).items():
        blueprint.bind_value(k, v)
    for provider in providers:
        blueprint.add(provider)
        log.debug("applied provider %s", getattr(provider, "__qualname__", type(provider).__qualname__))
    for fallback in fallbacks:
        blueprint.register_fallback(fallback)
    for k, v in (overrides or {}).items():
        blueprint.bind_value(k, v)

    return blueprint.build()
