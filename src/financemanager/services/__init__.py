"""Service module exports."""

from . import monthly, records

__all__ = [
    "monthly",
    "records",
]
