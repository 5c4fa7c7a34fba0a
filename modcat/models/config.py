"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modcat.models.mod import CatalogVariant, DependencyKind

DEFAULT_CATALOG_URL = "https://staging_cursemeta.dries007.net/api/v3/direct/"
DEFAULT_USER_AGENT = "modcat/0.3 (+https://github.com/modcat/modcat)"

LAYOUTS = ("root", "per-mod")


class AppConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Catalog API
    catalog_url: str = DEFAULT_CATALOG_URL
    game_id: int = 432
    section_id: int = 6
    user_agent: str = DEFAULT_USER_AGENT
    catalog_variant: CatalogVariant = CatalogVariant.EMBEDDED
    timeout_seconds: float = 0

    # Resolution
    follow_tool_dependencies: bool = True
    default_game_version: str = "1.12"

    # Local files
    mods_dir: str = "mods"
    registry_file: str = "mods.json"
    history_file: str = "history.line"
    layout: str = "root"
    chunk_size: int = 131072

    # Internal field not loaded from INI file
    config_path: str = Field("", repr=False)

    @field_validator("catalog_url")
    @classmethod
    def validate_catalog_url(cls, v: str) -> str:
        """Requires an http(s) URL and normalizes the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Catalog URL must start with http:// or https://.")
        return v if v.endswith("/") else v + "/"

    @field_validator("layout")
    @classmethod
    def validate_layout(cls, v: str) -> str:
        if v not in LAYOUTS:
            raise ValueError(f"Layout must be one of: {', '.join(LAYOUTS)}.")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Timeout cannot be negative (use 0 for no timeout).")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v < 1024 or v > 8 * 1048576:
            raise ValueError("Chunk size must be between 1 KB and 8 MB.")
        return v

    @field_validator("default_game_version", "user_agent", "registry_file", "mods_dir")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Value cannot be empty.")
        return v

    @property
    def propagate_kinds(self) -> frozenset[DependencyKind]:
        """Dependency kinds whose targets are downloaded recursively."""
        if self.follow_tool_dependencies:
            return frozenset({DependencyKind.REQUIRED, DependencyKind.TOOL})
        return frozenset({DependencyKind.REQUIRED})

    @property
    def mods_path(self) -> Path:
        return Path(self.mods_dir).expanduser()

    @property
    def registry_path(self) -> Path:
        return Path(self.registry_file).expanduser()

    @property
    def history_path(self) -> Path:
        return Path(self.history_file).expanduser()

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
