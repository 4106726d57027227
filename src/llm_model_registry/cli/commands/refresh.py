"""Refresh command for the LMR CLI."""

import click

from ..formatters import (
    create_console,
    format_json,
    format_refresh_json,
    format_refresh_table,
)
from ..utils import ExitCode, get_registry, handle_error


@click.command()
@click.option("--force", is_flag=True, help="Refresh even if the last refresh was recent.")
@click.pass_context
def refresh(ctx: click.Context, force: bool) -> None:
    """Reload the model catalog from live provider listings.

    Providers without an API key are skipped, and providers whose listing
    fails keep their current entries.
    """
    try:
        registry = get_registry(ctx)
        result = registry.refresh(force=force)

        if ctx.obj["format"] == "json":
            format_json(format_refresh_json(result))
        else:
            format_refresh_table(result, create_console(no_color=ctx.obj["no_color"]))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
