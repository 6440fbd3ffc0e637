"""Concrete repository implementations using SQLModel."""

from .record_store import SQLModelRecordStore, record_to_row, row_to_record

__all__ = [
    "SQLModelRecordStore",
    "record_to_row",
    "row_to_record",
]
