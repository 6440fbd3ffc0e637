"""Error taxonomy shared by the store, repository and aggregation layers."""

from __future__ import annotations


class FinanceManagerError(Exception):
    """Base class for all FinanceManager errors."""


class StorageUnavailable(FinanceManagerError):
    """A fetch or insert against the record store failed or timed out."""

    def __init__(self, message: str, *, kind: str | None = None, operation: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.operation = operation


class InvalidWindow(FinanceManagerError, ValueError):
    """Window size is not positive or the start month cannot be computed."""


class MalformedRecord(FinanceManagerError, ValueError):
    """A stored row or an incoming record does not form a valid record."""
