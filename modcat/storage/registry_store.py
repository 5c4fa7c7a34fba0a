"""
Whole-file JSON persistence for the mod registry.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from modcat.exceptions import RegistryStoreError
from modcat.models.mod import ModRecord

from .registry import ModRegistry

log = logging.getLogger(__name__)


class RegistryStore:
    """Loads the registry once at startup and rewrites it on every checkpoint."""

    def __init__(self, registry_path: Path):
        self.registry_path = registry_path

    def load(self) -> ModRegistry:
        """
        Reads the persisted registry. A missing file yields an empty registry.

        Raises:
            RegistryStoreError: If the file cannot be read or is not a valid
            list of mod records.
        """
        if not self.registry_path.is_file():
            log.debug(f"No registry at '{self.registry_path}', starting empty.")
            return ModRegistry()

        try:
            with open(self.registry_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RegistryStoreError(
                f"Could not read registry '{self.registry_path}': {e}"
            ) from e

        if not isinstance(data, list):
            raise RegistryStoreError(
                f"Registry '{self.registry_path}' must contain a JSON list."
            )

        try:
            records = [ModRecord.model_validate(item) for item in data]
        except ValidationError as e:
            raise RegistryStoreError(
                f"Registry '{self.registry_path}' contains invalid records:\n{e}"
            ) from e

        registry = ModRegistry(records)
        log.debug(f"Loaded {len(registry)} mods from '{self.registry_path}'.")
        return registry

    def save(self, registry: ModRegistry) -> None:
        """Writes the whole registry, ordered by id, truncating the old file."""
        payload = [record.to_json_dict() for record in registry.all()]
        try:
            self.registry_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.registry_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise RegistryStoreError(
                f"Could not save registry '{self.registry_path}': {e}"
            ) from e
        log.debug(f"Saved {len(payload)} mods to '{self.registry_path}'.")
