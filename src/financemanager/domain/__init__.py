"""Domain values, errors and repository protocols."""

from .errors import FinanceManagerError, InvalidWindow, MalformedRecord, StorageUnavailable
from .month import Month, month_range, window_start
from .records import Expense, Income, Record, RecordKind, natural_order, sum_totals

__all__ = [
    "Expense",
    "FinanceManagerError",
    "Income",
    "InvalidWindow",
    "MalformedRecord",
    "Month",
    "Record",
    "RecordKind",
    "StorageUnavailable",
    "month_range",
    "natural_order",
    "sum_totals",
    "window_start",
]
