"""In-process VLAN cache shared by the refresh loop and the collector."""

from __future__ import annotations

import threading

from .models.vlan import VlanRecord


class VlanCache:
    """Thread-safe map of VLAN name to its latest record.

    The refresh loop is the only writer. Entries are upserted one at a time
    and never removed, so a scrape running during a refresh may see a mix of
    old and new records.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[str, VlanRecord] = {}

    def write(self, name: str, record: VlanRecord) -> None:
        """Insert or replace a record."""
        record = record.model_copy()
        with self._lock:
            self._records[name] = record

    def read(self, name: str) -> tuple[VlanRecord | None, bool]:
        """Return ``(record, found)``; a miss is not an error."""
        with self._lock:
            record = self._records.get(name)
        return record, record is not None

    def read_all(self) -> dict[str, VlanRecord]:
        """Return a point-in-time copy of every entry."""
        with self._lock:
            return dict(self._records)

    def username(self, name: str) -> str:
        """Account label for ``name``, empty when unknown."""
        record, found = self.read(name)
        return record.username if found else ""

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
