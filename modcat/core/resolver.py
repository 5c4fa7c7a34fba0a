"""
Walks the dependency graph of a mod for one game version and downloads every
required file exactly once.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from rich.markup import escape

from modcat.api.client import CatalogClient
from modcat.cli.progress_manager import ProgressManager
from modcat.exceptions import ParseFailure
from modcat.media.downloader import Downloader
from modcat.models.config import AppConfig
from modcat.models.mod import CatalogVariant, DependencyKind, ModRecord
from modcat.models.report import DownloadedFile, ResolutionReport, VersionNotAvailable
from modcat.storage.registry import ModRegistry
from modcat.utils.path import create_dir, mod_directory, safe_name

log = logging.getLogger(__name__)

DEFAULT_PROPAGATE_KINDS = frozenset({DependencyKind.REQUIRED, DependencyKind.TOOL})


class DependencyResolver:
    """
    Resolves a root mod and its transitive dependencies to files on disk.

    The registry is used as a cache and is updated with every record fetched
    from the catalog; persisting it is left to the caller.
    """

    def __init__(
        self,
        registry: ModRegistry,
        catalog: CatalogClient,
        downloader: Downloader,
        mods_dir: Path,
        variant: CatalogVariant = CatalogVariant.EMBEDDED,
        propagate_kinds: Iterable[DependencyKind] = DEFAULT_PROPAGATE_KINDS,
        layout: str = "root",
        progress_manager: ProgressManager | None = None,
    ):
        self.registry = registry
        self.catalog = catalog
        self.downloader = downloader
        self.mods_dir = mods_dir
        self.variant = variant
        self.propagate_kinds = frozenset(propagate_kinds)
        self.layout = layout
        self.progress_manager = progress_manager

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        registry: ModRegistry,
        catalog: CatalogClient,
        downloader: Downloader,
        progress_manager: ProgressManager | None = None,
    ) -> "DependencyResolver":
        return cls(
            registry,
            catalog,
            downloader,
            mods_dir=config.mods_path,
            variant=config.catalog_variant,
            propagate_kinds=config.propagate_kinds,
            layout=config.layout,
            progress_manager=progress_manager,
        )

    def destination_for(self, root: ModRecord, record: ModRecord) -> Path:
        """Directory a record's file is written to within one resolution."""
        owner = root if self.layout == "root" else record
        return mod_directory(self.mods_dir, owner.name, owner.id)

    async def resolve(self, root_id: int, game_version: str) -> ResolutionReport:
        """
        Downloads `root_id` and everything it transitively depends on.

        Uses an explicit LIFO stack: the dependencies of the most recently
        downloaded mod are handled before siblings queued earlier. Mods with
        no file for `game_version` are recorded as warnings and their
        dependencies are not followed.

        Raises:
            RemoteNotFound, RemoteUnavailable: From the catalog; aborts the walk.
            ParseFailure: The catalog answered with a different mod.
        """
        report = ResolutionReport(root_id=root_id, game_version=game_version)
        stack = [root_id]
        visited: set[int] = set()
        root: ModRecord | None = None

        while stack:
            mod_id = stack.pop()
            if mod_id in visited:
                continue

            record = self.registry.lookup(mod_id)
            if record is None:
                log.info(f"Fetching metadata for mod [bold]{mod_id}[/bold]...")
                record = await self.catalog.fetch_by_id(mod_id)
                if record.id != mod_id:
                    raise ParseFailure(
                        f"Catalog returned mod {record.id} when asked for {mod_id}."
                    )
                self.registry.upsert(record)
                report.fetched_ids.append(mod_id)
                # Retry now that the record is cached.
                stack.append(mod_id)
                continue

            if root is None:
                root = record

            file_ref = record.file_reference_for(game_version, self.variant)
            if file_ref is None:
                warning = VersionNotAvailable(record.id, record.name, game_version)
                log.warning(f"[yellow]⚠ {escape(str(warning))}[/yellow]")
                report.note(warning)
                visited.add(mod_id)
                continue

            file_detail = await file_ref.resolve(self.catalog)
            directory = self.destination_for(root, record)
            create_dir(directory)
            destination = directory / safe_name(
                file_detail.disk_name, f"{record.id}-{file_detail.id}.jar"
            )

            log.info(
                f"Downloading [bold]{escape(record.name)}[/bold] "
                f"-> [dim]{escape(str(destination))}[/dim]"
            )
            bytes_written = await self.downloader.stream(
                file_detail.download_url,
                destination,
                file_detail.file_length,
                self.progress_manager,
            )
            visited.add(mod_id)
            report.downloaded.append(
                DownloadedFile(
                    mod_id=record.id,
                    file_id=file_detail.id,
                    url=file_detail.download_url,
                    path=destination,
                    bytes_written=bytes_written,
                )
            )

            for edge in file_detail.dependencies:
                if edge.kind in self.propagate_kinds:
                    stack.append(edge.addon_id)
                else:
                    log.debug(
                        f"Not following dependency {edge.addon_id} of {record.id} "
                        f"(type {edge.type})."
                    )

        return report
