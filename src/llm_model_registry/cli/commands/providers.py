"""Provider inspection commands for the LMR CLI."""

import click

from ..formatters import (
    create_console,
    format_json,
    format_providers_json,
    format_providers_table,
)
from ..utils import ExitCode, get_registry, handle_error


@click.group()
def providers() -> None:
    """Inspect providers."""
    pass


@providers.command(name="list")
@click.pass_context
def list_providers(ctx: click.Context) -> None:
    """List known providers with credential presence and model counts."""
    try:
        registry = get_registry(ctx)
        rows = [
            {
                "provider": provider,
                "has_api_key": registry.check_provider_api_key(provider),
                "models": len(registry.catalog.models(provider)),
            }
            for provider in registry.list_providers()
        ]

        if ctx.obj["format"] == "json":
            format_json(format_providers_json(rows))
        else:
            format_providers_table(rows, create_console(no_color=ctx.obj["no_color"]))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
