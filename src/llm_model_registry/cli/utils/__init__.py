"""CLI utilities package."""

from .helpers import (
    ExitCode,
    get_registry,
    handle_error,
    resolve_format,
)

__all__ = [
    "ExitCode",
    "get_registry",
    "handle_error",
    "resolve_format",
]
