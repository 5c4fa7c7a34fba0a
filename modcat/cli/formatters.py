"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modcat.models.mod import CatalogVariant, ModRecord
from modcat.models.report import ResolutionReport
from modcat.utils.formatting import format_count, format_duration, format_size


def format_error_with_suggestions(
    error: BaseException, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "RemoteNotFound": [
            "• Check the mod id; ids come from `search` results.",
            "• The mod may have been removed from the catalog.",
        ],
        "RemoteUnavailable": [
            "• The catalog might be temporarily unavailable.",
            "• Check your internet connection and `catalog_url` setting.",
        ],
        "ParseFailure": [
            "• The catalog returned data in an unexpected shape.",
            "• Check that `catalog_url` points at a supported API version.",
            "• Try the other `catalog_variant` setting.",
        ],
        "RegistryStoreError": [
            "• The registry file may be corrupt or unwritable.",
            "• Run `modcat clear --force` to start from an empty registry.",
        ],
        "ConfigurationError": [
            "• Fix the value shown above in your config file.",
            "• Run `modcat init --force` to regenerate a default config.",
        ],
        "ClientResponseError": [
            "• The download server rejected the request.",
            "• The file may have moved; run `update` and search again.",
        ],
        "TimeoutError": [
            "• The request timed out.",
            "• Raise `timeout_seconds` in your config, or set it to 0.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_search_results(records: list[ModRecord], console: Console | None = None):
    """Lists search hits with their ids, names and main pages."""
    console = console or Console()
    if not records:
        console.print("[yellow]No mod found.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, show_edge=False)
    table.add_column("ID", style="bold cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Downloads", justify="right")
    table.add_column("Main page", style="dim", overflow="fold")
    for record in records:
        table.add_row(
            str(record.id),
            escape(record.name),
            format_count(record.download_count),
            escape(record.website_url),
        )
    console.print(table)


def print_mod_details(
    record: ModRecord,
    variant: CatalogVariant = CatalogVariant.EMBEDDED,
    console: Console | None = None,
):
    """Shows everything the registry knows about one mod."""
    console = console or Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column(overflow="fold")

    versions = record.available_versions(variant)
    table.add_row("ID:", str(record.id))
    table.add_row("Summary:", escape(record.summary) or "[dim]-[/dim]")
    table.add_row("Main page:", escape(record.website_url) or "[dim]-[/dim]")
    table.add_row("Downloads:", format_count(record.download_count))
    table.add_row(
        "Game versions:", escape(", ".join(versions)) if versions else "[dim]none[/dim]"
    )

    console.print(
        Panel(table, title=f"[bold]{escape(record.name)}[/bold]", border_style="cyan")
    )


def print_report_summary(
    report: ResolutionReport, duration: float, console: Console | None = None
):
    """Prints a summary panel of a finished resolution."""
    console = console or Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    table.add_row("Game version:", report.game_version)
    table.add_row("Downloaded:", f"[green]{len(report.downloaded)} files[/green]")
    table.add_row("Total size:", format_size(report.total_bytes))
    table.add_row("Fetched metadata:", f"{len(report.fetched_ids)} mods")
    if report.warnings:
        table.add_row("Skipped:", f"[yellow]{len(report.warnings)} mods[/yellow]")
    table.add_row("Duration:", format_duration(duration))

    for downloaded in report.downloaded:
        table.add_row("", f"[dim]{escape(str(downloaded.path))}[/dim]")
    for warning in report.warnings:
        table.add_row("", f"[yellow]⚠ {escape(str(warning))}[/yellow]")

    border = "green" if not report.warnings else "yellow"
    console.print(
        Panel(
            table,
            title=f"[bold]Mod {report.root_id}[/bold]",
            border_style=border,
            expand=False,
        )
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            escape(content),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )
