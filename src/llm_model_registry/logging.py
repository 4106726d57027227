"""Logging utilities for the model registry.

This module provides standardized logging functionality for registry operations.
"""

import logging
from enum import Enum
from typing import Any

ROOT_LOGGER_NAME = "llm_model_registry"


class LogLevel(int, Enum):
    """Log levels for the registry."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for registry logging."""

    MODEL_CATALOG = "model_catalog"
    SEED_LOAD = "seed_load"
    REGISTRY_REFRESH = "registry_refresh"
    PROVIDER_FETCH = "provider_fetch"
    MODEL_RESOLUTION = "model_resolution"


_logger = logging.getLogger(ROOT_LOGGER_NAME)
_logger.addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the registry's logger hierarchy.

    Args:
        name: Module or component name, e.g. ``"registry"`` or ``__name__``

    Returns:
        Logger named ``llm_model_registry.<name>``
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str = "WARNING") -> None:
    """Attach a stream handler to the registry logger at the given level.

    Args:
        level: Level name such as ``"DEBUG"`` or ``"WARNING"``
    """
    _logger.setLevel(level)
    # Replace any earlier handler so output follows the current sys.stderr
    for existing in [h for h in _logger.handlers if type(h) is logging.StreamHandler]:
        _logger.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    _logger.addHandler(handler)


def _log(level: LogLevel, event: LogEvent, message: str, **data: Any) -> None:
    """Log an event with structured data.

    Records go to the ``llm_model_registry.<event>`` logger so each event
    type can be filtered independently.

    Args:
        level: Severity level
        event: Event type
        message: Human-readable message
        **data: Event data, attached to the record as ``data``
    """
    get_logger(event.value).log(int(level), message, extra={"event": event.value, "data": data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug-level event."""
    _log(LogLevel.DEBUG, event, message, **data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info-level event."""
    _log(LogLevel.INFO, event, message, **data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning-level event."""
    _log(LogLevel.WARNING, event, message, **data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error-level event."""
    _log(LogLevel.ERROR, event, message, **data)
