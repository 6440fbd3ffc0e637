"""In-memory cache holding the full history of one record kind."""

from __future__ import annotations

import threading
from typing import Optional

from ..domain.errors import StorageUnavailable
from ..domain.records import Record, RecordKind, natural_order
from ..domain.repositories.record_store import RecordStore
from ..logging_config import get_logger

logger = get_logger(__name__)


class RecordCache:
    """Ordered snapshot of every stored record of one kind.

    Loaded from ``store.fetch_all`` once (eagerly via ``load`` or lazily on the
    first ``get``) and kept current through ``append``. A single lock serializes
    loads, appends and snapshot reads; ``get`` hands out immutable tuples.
    """

    def __init__(self, store: RecordStore, kind: RecordKind):
        self.store = store
        self.kind = RecordKind(kind)
        self._lock = threading.Lock()
        self._records: list[Record] = []
        self._snapshot: Optional[tuple[Record, ...]] = None
        self._loaded = False
        self.last_error: Optional[StorageUnavailable] = None
        self.skipped = 0

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """Populate from storage unless already loaded."""
        with self._lock:
            if not self._loaded:
                self._load_locked()

    def refresh(self) -> None:
        """Reload the full history; on failure the records already held are kept."""
        with self._lock:
            self._load_locked()

    def drop(self) -> None:
        """Empty the cache; the next ``get`` reloads from storage."""
        with self._lock:
            self._records = []
            self._snapshot = None
            self._loaded = False

    def get(self) -> tuple[Record, ...]:
        """Return every cached record, most recent first."""
        with self._lock:
            if not self._loaded:
                self._load_locked()
            if self._snapshot is None:
                self._snapshot = tuple(natural_order(self._records))
            return self._snapshot

    def append(self, record: Record) -> None:
        """Add a record that has already been persisted.

        Callers must only append after the matching store insert succeeded.
        """
        with self._lock:
            if not self._loaded:
                # A successful reload already contains the stored row.
                self._load_locked()
                if self._loaded:
                    return
            self._records.append(record)
            self._snapshot = None

    def __len__(self) -> int:
        return len(self.get())

    def _load_locked(self) -> None:
        result = self.store.fetch_all(self.kind)
        self.last_error = result.error
        self.skipped = result.skipped
        if result.error is not None:
            # Stay unloaded so the next read retries; keep what is already held.
            logger.warning(
                "Could not load %s cache: %s",
                self.kind.value,
                result.error,
                extra={"kind": self.kind.value, "operation": "load"},
            )
            return
        self._records = list(result.records)
        self._snapshot = None
        self._loaded = True
        logger.info(
            "Loaded %d %s record(s) into cache",
            len(self._records),
            self.kind.value,
            extra={"kind": self.kind.value, "skipped": result.skipped},
        )
