"""
Defines the command-line interface for the application using Typer.
"""

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from modcat import __version__
from modcat.api.client import CatalogClient
from modcat.exceptions import ModcatError
from modcat.media.downloader import Downloader
from modcat.storage.config_manager import ConfigManager
from modcat.storage.history import CommandHistory
from modcat.storage.registry_store import RegistryStore

from .formatters import print_config
from .shell import ModShell, Status

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("modcat")

app = typer.Typer(
    name="modcat",
    help=(
        "Search a mod catalog and download mods together with their"
        " dependencies. Use 'modcat <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "modcat"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
    mods_dir: str | None = typer.Option(
        None, "--mods-dir", help="Directory downloaded mods are written to."
    ),
    registry_file: str | None = typer.Option(
        None, "--registry", help="Path of the registry file."
    ),
    variant: str | None = typer.Option(
        None,
        "--variant",
        help="Catalog metadata shape: 'embedded' file lists or 'pointer' file ids.",
    ),
):
    """modcat: mod catalog manager"""
    if version:
        console.print(f"[bold]modcat[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("modcat").setLevel(log_level)

    ctx.obj = {
        key: value
        for key, value in {
            "mods_dir": mods_dir,
            "registry_file": registry_file,
            "catalog_variant": variant,
        }.items()
        if value is not None
    }

    if show_config:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config(ctx.obj)
        print_config(
            CONFIG_FILE, config.model_dump(mode="json", exclude={"config_path"})
        )
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _build_shell(ctx: typer.Context, game_version: str | None = None) -> ModShell:
    config = ConfigManager(CONFIG_FILE).load_config(ctx.obj)
    store = RegistryStore(config.registry_path)
    registry = store.load()
    return ModShell(
        config=config,
        registry=registry,
        store=store,
        catalog=CatalogClient.from_config(config),
        downloader=Downloader(
            chunk_size=config.chunk_size,
            user_agent=config.user_agent,
            timeout_seconds=config.timeout_seconds,
        ),
        history=CommandHistory(config.history_path),
        console=console,
        game_version=game_version,
    )


def _execute_once(shell: ModShell, tokens: list[str], checkpoint: bool) -> None:
    with shell:
        status = shell.execute(tokens)
    if status is Status.FAILED:
        raise typer.Exit(code=1)
    if checkpoint:
        shell.store.save(shell.registry)


@app.command()
def shell(ctx: typer.Context):
    """Start the interactive shell."""
    console.print(
        "[bold cyan]modcat shell[/bold cyan] [dim]commands: search, download, "
        "print, update/clear, save, quit[/dim]"
    )
    _build_shell(ctx).run()


@app.command()
def search(
    ctx: typer.Context,
    terms: list[str] = typer.Argument(..., help="Words to search for."),  # noqa: B008
):
    """Search the catalog and cache the results in the registry."""
    _execute_once(_build_shell(ctx), ["search", *terms], checkpoint=True)


@app.command(name="download")
def download_command(
    ctx: typer.Context,
    mod_ids: list[str] = typer.Argument(..., help="Mod ids to download."),  # noqa: B008
    game_version: str | None = typer.Option(
        None,
        "--game-version",
        "-g",
        help="Exact game version to download files for (prompted if omitted).",
    ),
):
    """Download mods and their dependencies for one game version."""
    if game_version is None:
        config = ConfigManager(CONFIG_FILE).load_config(ctx.obj)
        game_version = typer.prompt(
            "Game version to download", default=config.default_game_version
        )
    _execute_once(
        _build_shell(ctx, game_version=game_version),
        ["download", *mod_ids],
        checkpoint=True,
    )


@app.command(name="print")
def print_command(
    ctx: typer.Context,
    mod_ids: list[str] = typer.Argument(..., help="Mod ids to show."),  # noqa: B008
):
    """Show cached registry entries."""
    _execute_once(_build_shell(ctx), ["print", *mod_ids], checkpoint=False)


@app.command()
def clear(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Remove every entry from the registry."""
    if not force and not typer.confirm(
        "Are you sure you want to clear the registry? Cached metadata will be lost."
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()
    _execute_once(_build_shell(ctx), ["clear"], checkpoint=False)


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config file."
    ),
):
    """Write a configuration file with default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()
    try:
        ConfigManager(CONFIG_FILE).save_new_config()
    except ModcatError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
