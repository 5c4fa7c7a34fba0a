"""
The interactive command loop: reads lines, dispatches parsed commands, and
checkpoints the registry.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any

import aiohttp
from rich.console import Console
from rich.markup import escape

from modcat.api.client import CatalogClient
from modcat.core.commands import (
    CommandKind,
    NoMatch,
    ParsedCommand,
    parse_command,
    parse_mod_ids,
)
from modcat.core.resolver import DependencyResolver
from modcat.exceptions import ModcatError, RegistryStoreError
from modcat.media.downloader import Downloader
from modcat.models.config import AppConfig
from modcat.storage.history import CommandHistory
from modcat.storage.registry import ModRegistry
from modcat.storage.registry_store import RegistryStore

from .formatters import (
    format_error_with_suggestions,
    print_mod_details,
    print_report_summary,
    print_search_results,
)
from .progress_manager import ProgressManager

log = logging.getLogger(__name__)

# Errors a command may raise that are reported without ending the session.
RECOVERABLE_ERRORS = (ModcatError, aiohttp.ClientError, OSError, TimeoutError)


class Status(Enum):
    CONTINUE = "continue"
    FAILED = "failed"
    QUIT = "quit"


class ModShell:
    """
    Runs commands against a registry on a single event loop.

    Use as a context manager (or through `run()`) so that network sessions
    are opened and closed on the same loop.
    """

    PROMPT = ">> "

    def __init__(
        self,
        config: AppConfig,
        registry: ModRegistry,
        store: RegistryStore,
        catalog: CatalogClient,
        downloader: Downloader,
        history: CommandHistory,
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
        game_version: str | None = None,
    ):
        """
        Args:
            read_line: Reads one line for a prompt. Raises EOFError at end of
                input and KeyboardInterrupt when the user interrupts.
            game_version: Fixed version for downloads; when None the user
                is prompted on every `download` command.
        """
        self.config = config
        self.registry = registry
        self.store = store
        self.catalog = catalog
        self.downloader = downloader
        self.history = history
        self.console = console or Console()
        self.read_line = read_line or self.console.input
        self.game_version = game_version
        self._runner: asyncio.Runner | None = None

    def __enter__(self) -> "ModShell":
        self._runner = asyncio.Runner()
        self._runner.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        runner, self._runner = self._runner, None
        try:
            runner.run(self._close_sessions())
        finally:
            runner.__exit__(exc_type, exc_val, exc_tb)
        return False

    async def _close_sessions(self) -> None:
        await self.catalog.close()
        await self.downloader.close()

    def _run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        if self._runner is None:
            return asyncio.run(coro)
        return self._runner.run(coro)

    def checkpoint(self) -> None:
        """Persists the registry and the history."""
        self.store.save(self.registry)
        self.history.save()
        log.debug(f"Checkpointed {len(self.registry)} mods.")

    def _checkpoint_after_error(self) -> None:
        try:
            self.checkpoint()
        except RegistryStoreError as e:
            self.console.print(format_error_with_suggestions(e))

    def run(self) -> None:
        """Reads and executes commands until `quit`, `exit` or end of input."""
        if not self.history.load():
            log.debug("No previous history.")

        with self:
            while True:
                try:
                    line = self.read_line(self.PROMPT)
                except KeyboardInterrupt:
                    self.console.print()
                    continue
                except EOFError:
                    self.console.print()
                    self.checkpoint()
                    break

                tokens = line.split()
                if not tokens:
                    continue
                if self.execute(tokens, record_history=True) is Status.QUIT:
                    break

    def execute(self, tokens: list[str], record_history: bool = False) -> Status:
        """Parses and runs one command."""
        command = parse_command(tokens)
        if isinstance(command, NoMatch):
            self.console.print(f"[red]Invalid command:[/red] {escape(command.line)}")
            return Status.CONTINUE

        if record_history:
            self.history.append(" ".join(tokens))
            self.history.save()

        handlers: dict[CommandKind, Callable[[ParsedCommand], Status]] = {
            CommandKind.SEARCH: self._search,
            CommandKind.DOWNLOAD: self._download,
            CommandKind.PRINT: self._print,
            CommandKind.CLEAR: self._clear,
            CommandKind.SAVE: self._save,
            CommandKind.QUIT: self._quit,
        }

        try:
            return handlers[command.kind](command)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Interrupted, saving registry...[/yellow]")
            self.checkpoint()
            raise
        except RECOVERABLE_ERRORS as e:
            self.console.print(format_error_with_suggestions(e))
            log.debug("Full traceback:", exc_info=True)
            self._checkpoint_after_error()
            return Status.FAILED

    def _prompt_game_version(self) -> str | None:
        if self.game_version:
            return self.game_version
        default = self.config.default_game_version
        try:
            answer = self.read_line(
                f"Game version to download {escape(f'[{default}]')}: "
            )
        except (EOFError, KeyboardInterrupt):
            self.console.print("\n[yellow]Download cancelled.[/yellow]")
            return None
        return answer.strip() or default

    def _search(self, command: ParsedCommand) -> Status:
        query = " ".join(command.args)
        records = self._run(self.catalog.search(query))
        print_search_results(records, self.console)
        added = self.registry.merge(records)
        if records:
            log.debug(f"Search '{query}' cached {added} new mods.")
        return Status.CONTINUE

    def _download(self, command: ParsedCommand) -> Status:
        mod_ids, invalid = parse_mod_ids(command.args)
        for token in invalid:
            self.console.print(f"[red]Not a valid mod id:[/red] {escape(token)}")
        if not mod_ids:
            return Status.CONTINUE

        game_version = self._prompt_game_version()
        if game_version is None:
            return Status.CONTINUE

        for mod_id in mod_ids:
            start_time = time.monotonic()
            with ProgressManager(self.console) as progress_manager:
                resolver = DependencyResolver.from_config(
                    self.config,
                    self.registry,
                    self.catalog,
                    self.downloader,
                    progress_manager=progress_manager,
                )
                report = self._run(resolver.resolve(mod_id, game_version))
            print_report_summary(report, time.monotonic() - start_time, self.console)
        return Status.CONTINUE

    def _print(self, command: ParsedCommand) -> Status:
        mod_ids, invalid = parse_mod_ids(command.args)
        for token in invalid:
            self.console.print(f"[red]Not a valid mod id:[/red] {escape(token)}")
        for mod_id in mod_ids:
            record = self.registry.lookup(mod_id)
            if record is None:
                self.console.print(
                    f"[yellow]Mod {mod_id} is not in the registry. "
                    "Use search or download first.[/yellow]"
                )
                continue
            print_mod_details(record, self.config.catalog_variant, self.console)
        return Status.CONTINUE

    def _clear(self, command: ParsedCommand) -> Status:
        removed = len(self.registry)
        self.registry.clear()
        self.checkpoint()
        self.console.print(
            f"[green]✓ Registry cleared ({removed} mods removed).[/green]"
        )
        return Status.CONTINUE

    def _save(self, command: ParsedCommand) -> Status:
        self.checkpoint()
        self.console.print(f"[green]✓ Saved {len(self.registry)} mods.[/green]")
        return Status.CONTINUE

    def _quit(self, command: ParsedCommand) -> Status:
        self.checkpoint()
        return Status.QUIT
