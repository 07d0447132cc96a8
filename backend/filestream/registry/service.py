"""Concurrency-safe, append-only registry of ingested files.

Thread safety: every operation acquires ``_lock``.  The lock is only held
for a dict access, never across I/O, so a single coarse lock is enough.
"""
import logging
import threading
from typing import Dict, Optional

from filestream.errors import DuplicateKeyError

from .schemas import FileRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_registry: Optional["FileRegistry"] = None


def get_registry() -> Optional["FileRegistry"]:
    """Return the global FileRegistry, or None if not yet initialised."""
    return _registry


def set_registry(registry: Optional["FileRegistry"]) -> None:
    """Set (or clear) the global FileRegistry instance."""
    global _registry
    _registry = registry


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class FileRegistry:
    """Maps public keys to ``FileRecord`` objects.

    There is no update or delete: a key, once registered, points to the
    same record until the process exits.
    """

    def __init__(self) -> None:
        self._records: Dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def insert(self, key: str, record: FileRecord) -> None:
        """Register ``record`` under ``key``.

        Raises:
            ValueError: If ``record.key`` differs from ``key``.
            DuplicateKeyError: If ``key`` is already registered.
        """
        if record.key != key:
            raise ValueError(f"Record key {record.key!r} does not match {key!r}")
        with self._lock:
            if key in self._records:
                raise DuplicateKeyError(key)
            self._records[key] = record
            count = len(self._records)
        logger.debug("[registry] Inserted %s (%d total)", key, count)

    def lookup(self, key: str) -> Optional[FileRecord]:
        """Return the record for ``key``, or None if it was never registered."""
        with self._lock:
            return self._records.get(key)

    def size(self) -> int:
        with self._lock:
            return len(self._records)

    def __len__(self) -> int:
        return self.size()
