"""Constants used throughout the lazy-ioc package.

This module defines the package logger and the component names the runtime
container registers for itself.
"""

import logging

LOGGER_NAME: str = "lazy_ioc"
"""Default logger name for the lazy-ioc package."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for lazy-ioc internal diagnostics."""

CYCLE_SEPARATOR: str = " -> "
"""Separator used when rendering a dependency cycle path."""
