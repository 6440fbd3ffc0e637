"""Immutable expense and income records."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Iterable, Sequence, TypeVar, Union

from .errors import MalformedRecord
from .month import Month


class RecordKind(str, Enum):
    """The two independently stored record streams."""

    EXPENSE = "expense"
    INCOME = "income"


def _normalize_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        value = value.date()
    return value.replace(day=1)


class _MonthlyRecord:
    """Shared behaviour for month-granular records with a frozen total.

    Subclasses are frozen dataclasses declaring ``date``, their amount fields
    in ``CATEGORY_FIELDS`` order and a ``total`` field excluded from ``__init__``.
    """

    __slots__ = ()

    kind: ClassVar[RecordKind]
    CATEGORY_FIELDS: ClassVar[tuple[str, ...]]

    def _freeze(self) -> None:
        object.__setattr__(self, "date", _normalize_date(self.date))  # type: ignore[attr-defined]
        total = 0.0
        for name in self.CATEGORY_FIELDS:
            amount = float(getattr(self, name))
            object.__setattr__(self, name, amount)
            total += amount
        object.__setattr__(self, "total", total)

    @property
    def month(self) -> Month:
        return Month.of(self.date)  # type: ignore[attr-defined]

    def categories(self) -> dict[str, float]:
        """Return category amounts keyed by field name, in declaration order."""
        return {name: getattr(self, name) for name in self.CATEGORY_FIELDS}

    def validate(self) -> _MonthlyRecord:
        """Return ``self`` when every amount is a finite, non-negative number.

        Raises:
            MalformedRecord: if any amount is negative, NaN or infinite.
        """

        for name, amount in self.categories().items():
            if not math.isfinite(amount):
                raise MalformedRecord(f"{self.kind.value}.{name} is not a finite amount: {amount!r}")
            if amount < 0:
                raise MalformedRecord(f"{self.kind.value}.{name} must not be negative: {amount!r}")
        return self


@dataclass(frozen=True, slots=True)
class Expense(_MonthlyRecord):
    """Monthly spending split across seven categories."""

    kind: ClassVar[RecordKind] = RecordKind.EXPENSE
    CATEGORY_FIELDS: ClassVar[tuple[str, ...]] = (
        "housing",
        "food",
        "going_out",
        "transportation",
        "travel",
        "tax",
        "other",
    )

    date: date
    housing: float = 0.0
    food: float = 0.0
    going_out: float = 0.0
    transportation: float = 0.0
    travel: float = 0.0
    tax: float = 0.0
    other: float = 0.0
    total: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self._freeze()


@dataclass(frozen=True, slots=True)
class Income(_MonthlyRecord):
    """Monthly income split across five sources."""

    kind: ClassVar[RecordKind] = RecordKind.INCOME
    CATEGORY_FIELDS: ClassVar[tuple[str, ...]] = (
        "salary",
        "help",
        "entrepreneur",
        "passive",
        "other",
    )

    date: date
    salary: float = 0.0
    help: float = 0.0
    entrepreneur: float = 0.0
    passive: float = 0.0
    other: float = 0.0
    total: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self._freeze()


Record = Union[Expense, Income]
RecordT = TypeVar("RecordT", Expense, Income)

RECORD_TYPES: dict[RecordKind, type] = {
    RecordKind.EXPENSE: Expense,
    RecordKind.INCOME: Income,
}


def record_type(kind: RecordKind) -> type:
    return RECORD_TYPES[RecordKind(kind)]


def natural_order(records: Iterable[RecordT]) -> list[RecordT]:
    """Sort records most recent first.

    Records sharing a month keep their relative input order; there is no
    secondary key.
    """

    return sorted(records, key=lambda record: record.date, reverse=True)


def sum_totals(records: Iterable[Record]) -> float:
    """Sum the ``total`` of every record."""

    return sum((record.total for record in records), 0.0)


def amount_field_names(kind: RecordKind) -> Sequence[str]:
    """Return the amount columns for ``kind`` (``total`` excluded)."""

    return record_type(kind).CATEGORY_FIELDS


