"""Main CLI application for the LLM Model Registry."""

from typing import Optional

import click
import rich_click as rich_click

from ..logging import configure_logging
from .utils import resolve_format

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


def _show_version(ctx: click.Context) -> None:
    """Print the library version and exit."""
    try:
        from .. import __version__

        library_version = __version__
    except ImportError:
        library_version = "unknown"

    click.echo(f"Library version: {library_version}")
    ctx.exit()


@click.group()
@click.option(
    "--format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option(
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: _show_version(ctx) if value else None,
    help="Print library version information.",
)
@click.pass_context
def app(
    ctx: click.Context,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
) -> None:
    """LLM Model Registry CLI - inspect and refresh the model catalog.

    Provider credentials are read from the usual environment variables
    (OPENAI_API_KEY, ANTHROPIC_API_KEY, ...). OpenAI-compatible providers
    can be added with OPENAI_COMPATIBLE_DATA or a compatible_providers.yml
    file.

    Examples:
      # List catalogued models after refreshing from provider APIs
      lmr models list --refresh

      # Show what a reference resolves to
      lmr models resolve openai gpt-4.1

      # Force a refresh
      lmr refresh --force
    """
    # Store global options in context for subcommands
    ctx.ensure_object(dict)

    # Configure logging level based on verbosity
    log_level = "WARNING"
    if debug:
        log_level = "DEBUG"
    elif verbose > quiet:
        if verbose >= 2:
            log_level = "DEBUG"
        elif verbose >= 1:
            log_level = "INFO"
    elif quiet > verbose:
        log_level = "ERROR"
    configure_logging(log_level)

    ctx.obj.setdefault("registry", None)
    ctx.obj.update(
        {
            "format": resolve_format(format),
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
        }
    )


# Import and register subcommands (at module top is preferred, but we place
# here after context is built to avoid circular import issues in runtime.)
from .commands import models, providers, refresh  # noqa: E402

app.add_command(models.models)
app.add_command(providers.providers)
app.add_command(refresh.refresh)


if __name__ == "__main__":
    app()
