"""
Pydantic models for catalog metadata: mods, their files and dependency edges.

Field names follow the catalog's camelCase JSON. Models accept either the
alias or the Python name on input and are always dumped by alias so that the
persisted registry reads back through the same models.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from modcat.api.client import CatalogClient


class DependencyKind(IntEnum):
    """
    Known numeric dependency codes.

    Only these two codes are ever followed. The mapping is an assumption
    about the catalog, not a documented contract; any other code is
    recorded on the edge but never traversed.
    """

    REQUIRED = 1
    TOOL = 3


class CatalogVariant(str, Enum):
    """Which per-version file shape of a ModRecord the resolver reads."""

    EMBEDDED = "embedded"
    POINTER = "pointer"


def normalize_version(version: str) -> str:
    """Normalizes a game version string for exact comparison."""
    return version.strip().lower()


class CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class DependencyEdge(CatalogModel):
    """A directed edge from a file to another mod it depends on."""

    addon_id: int = Field(alias="addonId")
    type: int

    @property
    def kind(self) -> DependencyKind | None:
        """The known kind for this edge's code, or None for an unmapped code."""
        try:
            return DependencyKind(self.type)
        except ValueError:
            return None


class FileRecord(CatalogModel):
    """One concrete downloadable artifact for one mod version."""

    id: int
    download_url: str = Field(alias="downloadUrl")
    file_name: str = Field(default="", alias="fileName")
    file_name_on_disk: str = Field(default="", alias="fileNameOnDisk")
    file_length: int | None = Field(default=None, alias="fileLength")
    game_versions: list[str] = Field(default_factory=list, alias="gameVersion")
    dependencies: list[DependencyEdge] = Field(default_factory=list)

    @property
    def disk_name(self) -> str:
        return self.file_name_on_disk or self.file_name or f"{self.id}.jar"

    def supports(self, game_version: str) -> bool:
        wanted = normalize_version(game_version)
        return any(normalize_version(v) == wanted for v in self.game_versions)


class FilePointer(CatalogModel):
    """A lightweight version -> file id pointer that needs a second fetch."""

    game_version: str = Field(alias="gameVersion")
    project_file_id: int = Field(alias="projectFileId")
    project_file_name: str = Field(default="", alias="projectFileName")


class EmbeddedFileReference:
    """A file reference whose FileRecord is already held by the ModRecord."""

    def __init__(self, mod_id: int, file: FileRecord):
        self.mod_id = mod_id
        self.file_id = file.id
        self.file = file

    async def resolve(self, catalog: "CatalogClient") -> FileRecord:
        return self.file

    def __repr__(self) -> str:
        return f"EmbeddedFileReference(mod_id={self.mod_id}, file_id={self.file_id})"


class PointerFileReference:
    """A file reference that must be resolved through the catalog."""

    def __init__(self, mod_id: int, file_id: int):
        self.mod_id = mod_id
        self.file_id = file_id

    async def resolve(self, catalog: "CatalogClient") -> FileRecord:
        return await catalog.fetch_file_detail(self.mod_id, self.file_id)

    def __repr__(self) -> str:
        return f"PointerFileReference(mod_id={self.mod_id}, file_id={self.file_id})"


FileReference = EmbeddedFileReference | PointerFileReference


class ModRecord(CatalogModel):
    """Catalog metadata for a single mod."""

    id: int
    name: str
    summary: str = ""
    website_url: str = Field(default="", alias="websiteUrl")
    download_count: float = Field(default=0, alias="downloadCount")
    latest_files: list[FileRecord] = Field(default_factory=list, alias="latestFiles")
    game_version_latest_files: list[FilePointer] = Field(
        default_factory=list, alias="gameVersionLatestFiles"
    )

    def file_reference_for(
        self,
        game_version: str,
        variant: CatalogVariant = CatalogVariant.EMBEDDED,
    ) -> FileReference | None:
        """
        Finds the file for an exact (normalized) game version.

        When several entries match, the highest file id is taken as the
        newest build. Returns None if nothing matches.
        """
        if variant == CatalogVariant.POINTER:
            wanted = normalize_version(game_version)
            pointers = [
                p
                for p in self.game_version_latest_files
                if normalize_version(p.game_version) == wanted
            ]
            if not pointers:
                return None
            best = max(pointers, key=lambda p: p.project_file_id)
            return PointerFileReference(self.id, best.project_file_id)

        matches = [f for f in self.latest_files if f.supports(game_version)]
        if not matches:
            return None
        return EmbeddedFileReference(self.id, max(matches, key=lambda f: f.id))

    def available_versions(self, variant: CatalogVariant) -> list[str]:
        """Lists the distinct game versions this record has files for."""
        if variant == CatalogVariant.POINTER:
            versions = [p.game_version for p in self.game_version_latest_files]
        else:
            versions = [v for f in self.latest_files for v in f.game_versions]
        return list(dict.fromkeys(versions))
