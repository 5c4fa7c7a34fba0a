"""
Utilities for building safe on-disk locations for downloaded mods.
"""

from pathlib import Path

from pathvalidate import sanitize_filename


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def safe_name(name: str, fallback: str) -> str:
    """Sanitizes a catalog-provided name for use as a single path component."""
    cleaned = sanitize_filename(name.strip(), platform="universal").strip(" .")
    return cleaned or fallback


def mod_directory(mods_dir: Path, mod_name: str, mod_id: int) -> Path:
    """Returns the directory that holds files for a mod named `mod_name`."""
    return mods_dir / safe_name(mod_name, f"mod-{mod_id}")
