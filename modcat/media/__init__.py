"""
Media Layer.

This package is responsible for streaming mod files to disk.
"""

from .downloader import Downloader

__all__ = ["Downloader"]
