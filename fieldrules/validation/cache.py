"""Compiled-type cache keyed by record class identity."""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .compiler import CompiledType


class CompiledTypeCache:
    """Lazily populated mapping from record class to its CompiledType.

    Entries are never replaced once inserted: ``put_if_absent`` returns the
    winning entry when two callers compile the same type concurrently.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[type, CompiledType] = {}

    def get(self, record_type: type) -> CompiledType | None:
        return self._entries.get(record_type)

    def put_if_absent(self, record_type: type, compiled: CompiledType) -> CompiledType:
        with self._lock:
            return self._entries.setdefault(record_type, compiled)

    def clear(self, record_type: type | None = None) -> None:
        """Drop one entry, or every entry when ``record_type`` is None."""
        with self._lock:
            if record_type is None: self._entries.clear()
            else: self._entries.pop(record_type, None)

    def __contains__(self, record_type: type) -> bool: return record_type in self._entries

    def __len__(self) -> int: return len(self._entries)
