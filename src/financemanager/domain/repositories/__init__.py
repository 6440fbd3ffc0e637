"""Repository protocol definitions for domain layer."""

from .record_store import FetchResult, InsertResult, RecordStore

__all__ = [
    "FetchResult",
    "InsertResult",
    "RecordStore",
]
