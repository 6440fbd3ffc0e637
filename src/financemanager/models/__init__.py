"""SQLModel table exports."""

from .expense import ExpenseRow
from .income import IncomeRow

__all__ = [
    "ExpenseRow",
    "IncomeRow",
]
