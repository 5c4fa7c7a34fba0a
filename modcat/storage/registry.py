"""
An in-memory, id-indexed store of mod metadata kept sorted by id.
"""

import bisect
import logging
from collections.abc import Iterable, Iterator

from modcat.models.mod import ModRecord

log = logging.getLogger(__name__)


class ModRegistry:
    """
    Holds at most one ModRecord per id, always ordered by id.

    This class performs no I/O; loading and saving are handled by
    RegistryStore.
    """

    def __init__(self, records: Iterable[ModRecord] = ()):
        self._records: list[ModRecord] = []
        self._ids: list[int] = []
        for record in records:
            self.upsert(record)

    def _index(self, mod_id: int) -> int | None:
        i = bisect.bisect_left(self._ids, mod_id)
        if i < len(self._ids) and self._ids[i] == mod_id:
            return i
        return None

    def lookup(self, mod_id: int) -> ModRecord | None:
        i = self._index(mod_id)
        return self._records[i] if i is not None else None

    def upsert(self, record: ModRecord) -> bool:
        """
        Inserts a record or replaces the existing one with the same id.

        Returns True if the id was not present before.
        """
        i = bisect.bisect_left(self._ids, record.id)
        if i < len(self._ids) and self._ids[i] == record.id:
            self._records[i] = record
            return False
        self._ids.insert(i, record.id)
        self._records.insert(i, record)
        return True

    def merge(self, records: Iterable[ModRecord]) -> int:
        """Upserts every record and returns how many ids were new."""
        added = sum(1 for record in records if self.upsert(record))
        log.debug(f"Merged records into registry, {added} new.")
        return added

    def all(self) -> list[ModRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
        self._ids.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, mod_id: object) -> bool:
        return isinstance(mod_id, int) and self._index(mod_id) is not None

    def __iter__(self) -> Iterator[ModRecord]:
        return iter(list(self._records))
