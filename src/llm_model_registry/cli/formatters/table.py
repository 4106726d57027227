"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.table import Table

from ...catalog import ProviderSummary
from ...refresh import RefreshResult


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    # Let Rich use the actual terminal width to avoid truncating headers
    return Console(file=output, no_color=no_color)


def _flag(value: bool) -> str:
    return "✓" if value else "✗"


def format_models_table(summaries: List[ProviderSummary], console: Optional[Console] = None) -> None:
    """Format catalog summaries as a Rich table.

    Args:
        summaries: Provider summaries, in display order
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Models", show_header=True, header_style="bold magenta")
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Model", no_wrap=True)
    table.add_column("Display Name", style="dim")
    table.add_column("Tool\nCalls", justify="center")
    table.add_column("Image\nInput", justify="center")

    for summary in summaries:
        provider_label = summary.provider if summary.has_api_key else f"{summary.provider} (no key)"
        for model in summary.models:
            table.add_row(
                provider_label,
                model.name,
                model.display_name or "",
                _flag(not model.tool_call_unsupported),
                _flag(not model.image_input_unsupported),
            )

    console.print(table)


def format_providers_table(rows: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """Format provider rows as a Rich table.

    Args:
        rows: Dicts with ``provider``, ``has_api_key`` and ``models`` keys
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Providers", show_header=True, header_style="bold magenta")
    table.add_column("Provider", style="cyan")
    table.add_column("API Key", justify="center")
    table.add_column("Models", justify="right")

    for row in rows:
        style = "" if row["has_api_key"] else "dim"
        table.add_row(row["provider"], _flag(row["has_api_key"]), str(row["models"]), style=style)

    console.print(table)


def format_refresh_table(result: RefreshResult, console: Optional[Console] = None) -> None:
    """Format a refresh result as a Rich table.

    Args:
        result: Refresh result
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    console.print(f"[bold]Status:[/bold] {result.status.value}")
    console.print(result.message)
    if not result.model_counts:
        return

    table = Table(title="Provider Listings", show_header=True, header_style="bold magenta")
    table.add_column("Provider", style="cyan")
    table.add_column("Models", justify="right")
    table.add_column("Outcome")

    for provider, count in sorted(result.model_counts.items()):
        if provider in result.failed_providers:
            outcome = "[red]failed, kept previous entries[/red]"
        elif provider in result.skipped_providers:
            outcome = "[yellow]no API key, skipped[/yellow]"
        elif count:
            outcome = "[green]updated[/green]"
        else:
            outcome = "empty, kept previous entries"
        table.add_row(provider, str(count), outcome)

    console.print(table)
