"""Record store protocol and the result types it returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from ..errors import FinanceManagerError, StorageUnavailable
from ..month import Month
from ..records import Record, RecordKind


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Records read from the store plus any failure observed while reading.

    A failed fetch carries no records and sets ``error``; callers treat it like
    an empty table. ``skipped`` counts stored rows that could not be parsed.
    """

    records: tuple[Record, ...] = ()
    error: Optional[StorageUnavailable] = None
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


@dataclass(frozen=True, slots=True)
class InsertResult:
    """Outcome of a single insert."""

    record: Record
    error: Optional[FinanceManagerError] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None


class RecordStore(Protocol):
    """Narrow interface over durable storage. No business rules live here."""

    def fetch_all(self, kind: RecordKind) -> FetchResult:
        """Return every stored record of ``kind``, most recent first."""
        ...

    def fetch_window(self, kind: RecordKind, anchor_month: Month, count: int) -> FetchResult:
        """Return at most ``count`` records dated on or before ``anchor_month``, most recent first."""
        ...

    def insert(self, kind: RecordKind, record: Record) -> InsertResult:
        """Persist ``record`` as a new row."""
        ...
