"""Record repository composing the store adapter with the in-memory cache."""

from __future__ import annotations

import threading
from typing import Optional

from ..domain.errors import InvalidWindow, MalformedRecord, StorageUnavailable
from ..domain.month import Month
from ..domain.records import Record, RecordKind, record_type
from ..domain.repositories.record_store import FetchResult, InsertResult, RecordStore
from ..infra.cache import RecordCache
from ..logging_config import get_logger

logger = get_logger(__name__)


class RecordRepository:
    """Insert and query records of a single kind.

    Windowed reads always go to the store; full-history reads come from the
    cache. Store insert and cache append run under one lock so a record is
    visible in the cache exactly when its row was written.
    """

    def __init__(self, store: RecordStore, cache: RecordCache, kind: RecordKind | None = None):
        kind = RecordKind(kind) if kind is not None else cache.kind
        if cache.kind is not kind:
            raise ValueError(f"Cache holds {cache.kind.value} records, not {kind.value}")
        self.store = store
        self.cache = cache
        self.kind = kind
        self._insert_lock = threading.Lock()
        self._last_error: Optional[StorageUnavailable] = None

    @property
    def last_fetch_error(self) -> Optional[StorageUnavailable]:
        """The storage error from the most recent windowed query, if any."""
        return self._last_error

    def insert(self, record: Record) -> InsertResult:
        """Persist ``record`` and, only on success, add it to the cache."""
        if not isinstance(record, record_type(self.kind)):
            error = MalformedRecord(f"Expected {self.kind.value} record, got {type(record).__name__}")
            return InsertResult(record=record, error=error)
        try:
            record.validate()
        except MalformedRecord as exc:
            logger.warning("Rejected %s insert: %s", self.kind.value, exc)
            return InsertResult(record=record, error=exc)

        with self._insert_lock:
            result = self.store.insert(self.kind, record)
            if not result.ok:
                return result
            self.cache.append(record)
        logger.info(
            "Inserted %s for %s",
            self.kind.value,
            record.month,
            extra={"kind": self.kind.value, "total": record.total},
        )
        return result

    def windowed_query(self, anchor_month: Month, count: int) -> FetchResult:
        """Return at most ``count`` records dated in or before ``anchor_month``, newest first.

        Raises:
            InvalidWindow: if ``count`` is not a positive integer.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidWindow(f"Window size must be a positive integer, got {count!r}")
        result = self.store.fetch_window(self.kind, Month.of(anchor_month), count)
        self._last_error = result.error
        return result

    def all_records(self) -> tuple[Record, ...]:
        """Return the full cached history, most recent first."""
        return self.cache.get()
