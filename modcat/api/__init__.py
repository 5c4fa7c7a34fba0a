"""
Catalog API Layer.

This package handles all communication with the remote mod catalog.
"""

from .client import CatalogClient

__all__ = ["CatalogClient"]
