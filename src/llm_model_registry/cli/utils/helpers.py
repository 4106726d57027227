"""Helper functions for CLI operations."""

import sys
from typing import Optional

import click

from ...registry import ModelRegistry


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    MODEL_NOT_FOUND = 3
    CONFIGURATION_ERROR = 4


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    # Auto-detect based on TTY
    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def get_registry(ctx: click.Context) -> ModelRegistry:
    """Return the registry for this invocation, building it on first use.

    A registry placed in ``ctx.obj["registry"]`` by the caller is reused.
    """
    registry = ctx.obj.get("registry")
    if registry is None:
        registry = ModelRegistry()
        ctx.obj["registry"] = registry
    return registry
