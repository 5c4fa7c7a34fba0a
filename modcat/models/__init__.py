"""
Data Models Layer.

This package contains the Pydantic models for catalog metadata and
configuration, plus the dataclasses that describe a resolution.
"""

from .config import AppConfig
from .mod import (
    CatalogVariant,
    DependencyEdge,
    DependencyKind,
    FilePointer,
    FileRecord,
    ModRecord,
)
from .report import DownloadedFile, ResolutionReport, VersionNotAvailable

__all__ = [
    "AppConfig",
    "CatalogVariant",
    "DependencyEdge",
    "DependencyKind",
    "DownloadedFile",
    "FilePointer",
    "FileRecord",
    "ModRecord",
    "ResolutionReport",
    "VersionNotAvailable",
]
