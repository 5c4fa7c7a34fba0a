"""
Dataclasses describing the outcome of one dependency resolution.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class VersionNotAvailable:
    """Soft warning: a mod has no file for the requested game version."""

    mod_id: int
    mod_name: str
    game_version: str

    def __str__(self) -> str:
        return (
            f"No file of '{self.mod_name}' ({self.mod_id}) "
            f"for game version {self.game_version}"
        )


@dataclass(frozen=True)
class DownloadedFile:
    mod_id: int
    file_id: int
    url: str
    path: Path
    bytes_written: int


@dataclass
class ResolutionReport:
    """Tracks what a single resolution fetched, downloaded and skipped."""

    root_id: int
    game_version: str
    downloaded: list[DownloadedFile] = field(default_factory=list)
    warnings: list[VersionNotAvailable] = field(default_factory=list)
    fetched_ids: list[int] = field(default_factory=list)

    def note(self, warning: VersionNotAvailable) -> None:
        self.warnings.append(warning)

    @property
    def downloaded_ids(self) -> list[int]:
        return [d.mod_id for d in self.downloaded]

    @property
    def total_bytes(self) -> int:
        return sum(d.bytes_written for d in self.downloaded)
