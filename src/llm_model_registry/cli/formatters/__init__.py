"""CLI formatters package."""

from .json import (
    format_json,
    format_models_json,
    format_providers_json,
    format_refresh_json,
)
from .table import (
    create_console,
    format_models_table,
    format_providers_table,
    format_refresh_table,
)

__all__ = [
    "format_json",
    "format_models_json",
    "format_providers_json",
    "format_refresh_json",
    "create_console",
    "format_models_table",
    "format_providers_table",
    "format_refresh_table",
]
