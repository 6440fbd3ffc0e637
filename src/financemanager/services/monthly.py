"""Monthly aggregation of expense and income records onto a rolling window."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from ..domain.errors import InvalidWindow
from ..domain.month import Month, month_range, window_start
from ..domain.records import Expense, Income, Record, natural_order
from ..logging_config import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from .records import RecordRepository

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MonthBucket:
    """Expense and income totals for one calendar month."""

    month: Month
    expense_total: float = 0.0
    income_total: float = 0.0

    @property
    def net(self) -> float:
        return self.income_total - self.expense_total


@dataclass(frozen=True, slots=True)
class CategorySnapshot:
    """Category split of a single expense record."""

    month: Month
    amounts: tuple[tuple[str, float], ...]
    total: float

    @classmethod
    def from_expense(cls, expense: Expense) -> CategorySnapshot:
        return cls(
            month=expense.month,
            amounts=tuple(expense.categories().items()),
            total=expense.total,
        )

    def as_dict(self) -> dict[str, float]:
        return dict(self.amounts)


@dataclass(frozen=True, slots=True)
class MonthlySeries:
    """Month-aligned totals for a window, oldest month first."""

    anchor: Month
    window: int
    buckets: tuple[MonthBucket, ...]
    category_snapshot: Optional[CategorySnapshot] = None

    @property
    def start(self) -> Month:
        return self.buckets[0].month

    @property
    def expense_total(self) -> float:
        return sum((bucket.expense_total for bucket in self.buckets), 0.0)

    @property
    def income_total(self) -> float:
        return sum((bucket.income_total for bucket in self.buckets), 0.0)

    @property
    def net_total(self) -> float:
        return self.income_total - self.expense_total

    def labels(self) -> list[str]:
        """ISO ``YYYY-MM`` label per bucket."""
        return [bucket.month.isoformat() for bucket in self.buckets]

    def __len__(self) -> int:
        return len(self.buckets)

    def __iter__(self) -> Iterator[MonthBucket]:
        return iter(self.buckets)


def _totals_by_month(records: Iterable[Record]) -> dict[Month, float]:
    totals: dict[Month, float] = defaultdict(float)
    for record in records:
        totals[record.month] += record.total
    return totals


def build_monthly_series(
    anchor_month: Month | date,
    window_size: int,
    expense_records: Iterable[Expense],
    income_records: Iterable[Income],
) -> MonthlySeries:
    """Align expenses and incomes onto the ``window_size`` months ending at ``anchor_month``.

    Every month in the window gets exactly one bucket, ascending, with totals
    defaulting to 0.0. Records sharing a month are summed; only year and month
    are compared. The category snapshot comes from the most recent expense in
    the window, or is ``None`` when the window holds no expense.

    Raises:
        InvalidWindow: if ``window_size`` is not positive or the window start
            cannot be computed for ``anchor_month``.
    """

    anchor = Month.of(anchor_month)
    start = window_start(anchor, window_size)

    expenses = list(expense_records)
    expense_totals = _totals_by_month(expenses)
    income_totals = _totals_by_month(income_records)

    buckets = tuple(
        MonthBucket(
            month=month,
            expense_total=expense_totals.get(month, 0.0),
            income_total=income_totals.get(month, 0.0),
        )
        for month in month_range(start, anchor)
    )

    in_window = [expense for expense in expenses if start <= expense.month <= anchor]
    snapshot = CategorySnapshot.from_expense(natural_order(in_window)[0]) if in_window else None

    return MonthlySeries(
        anchor=anchor,
        window=window_size,
        buckets=buckets,
        category_snapshot=snapshot,
    )


def build_category_trend(
    expense_records: Iterable[Expense],
    anchor_month: Month | date,
    window_size: int,
) -> dict[str, list[tuple[Month, float]]]:
    """Per-category (month, amount) points for each expense in the window, oldest first.

    Points are per record, not summed, so a month with two records yields two
    points per category.
    """

    anchor = Month.of(anchor_month)
    start = window_start(anchor, window_size)
    in_window = [expense for expense in expense_records if start <= expense.month <= anchor]
    ordered = sorted(in_window, key=lambda expense: expense.date)

    trend: dict[str, list[tuple[Month, float]]] = {name: [] for name in Expense.CATEGORY_FIELDS}
    for expense in ordered:
        for name, amount in expense.categories().items():
            trend[name].append((expense.month, amount))
    return trend


def recent_anchor_months(today: Month | date, count: int = 12) -> list[Month]:
    """Return the ``count`` selectable anchor months, newest first."""

    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidWindow(f"Period count must be a positive integer, got {count!r}")
    current = Month.of(today)
    months: list[Month] = []
    for offset in range(count):
        try:
            months.append(current.shift(-offset))
        except ValueError:
            break
    return months


def load_monthly_series(
    expense_repo: RecordRepository,
    income_repo: RecordRepository,
    anchor_month: Month | date,
    window_size: int,
) -> MonthlySeries:
    """Fetch both windows from storage and align them.

    Storage failures degrade to zero-filled buckets; they are logged and left
    on each repository's ``last_fetch_error``.
    """

    anchor = Month.of(anchor_month)
    window_start(anchor, window_size)

    expenses = expense_repo.windowed_query(anchor, window_size)
    incomes = income_repo.windowed_query(anchor, window_size)
    for label, result in (("expense", expenses), ("income", incomes)):
        if result.error is not None:
            logger.warning("Building series without %s data: %s", label, result.error)

    return build_monthly_series(anchor, window_size, expenses.records, incomes.records)
