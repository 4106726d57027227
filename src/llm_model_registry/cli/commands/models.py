"""Model inspection commands for the LMR CLI."""

from typing import Optional

import click

from ...errors import FallbackModelUnavailableError
from ...handles import ModelReference
from ..formatters import (
    create_console,
    format_json,
    format_models_json,
    format_models_table,
)
from ..utils import ExitCode, get_registry, handle_error


@click.group()
def models() -> None:
    """Inspect catalogued models."""
    pass


@models.command(name="list")
@click.option("--provider", type=str, help="Only show models from this provider.")
@click.option(
    "--refresh/--no-refresh",
    default=False,
    help="Run a throttled refresh from live provider listings before listing.",
)
@click.pass_context
def list_models(ctx: click.Context, provider: Optional[str], refresh: bool) -> None:
    """List catalogued models, credentialed providers first."""
    try:
        registry = get_registry(ctx)
        summaries = registry.models_info(refresh=refresh)
        if provider:
            summaries = [s for s in summaries if s.provider == provider]
            if not summaries:
                handle_error(click.BadParameter(f"No models found for provider '{provider}'"), ExitCode.MODEL_NOT_FOUND)

        if ctx.obj["format"] == "json":
            format_json(format_models_json(summaries))
        else:
            format_models_table(summaries, create_console(no_color=ctx.obj["no_color"]))
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@models.command()
@click.argument("provider")
@click.argument("model")
@click.pass_context
def resolve(ctx: click.Context, provider: str, model: str) -> None:
    """Show which catalog entry PROVIDER/MODEL resolves to."""
    try:
        registry = get_registry(ctx)
        handle = registry.get_model(ModelReference(provider, model))
        key = registry.catalog.key_for(handle)
        resolved_provider, resolved_model = key if key else (handle.provider, handle.api_name)
        info = {
            "requested": {"provider": provider, "model": model},
            "resolved": {"provider": resolved_provider, "model": resolved_model},
            "fallback": (resolved_provider, resolved_model) != (provider, model),
            "tool_call_unsupported": registry.is_tool_call_unsupported(handle),
        }

        if ctx.obj["format"] == "json":
            format_json(info)
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            console.print(f"[bold]Requested:[/bold] {provider}/{model}")
            console.print(f"[bold]Resolved:[/bold] {resolved_provider}/{resolved_model}")
            if info["fallback"]:
                console.print("[yellow]Using the fallback model[/yellow]")
            tools = "unsupported" if info["tool_call_unsupported"] else "supported"
            console.print(f"[bold]Tool calls:[/bold] {tools}")
    except FallbackModelUnavailableError as e:
        handle_error(e, ExitCode.CONFIGURATION_ERROR)
    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
