"""Calendar month identity and month arithmetic."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator

from .errors import InvalidWindow

MIN_YEAR = 1
MAX_YEAR = 9999


@dataclass(frozen=True, order=True, slots=True)
class Month:
    """A (year, month) pair with no day component."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f"year must be in {MIN_YEAR}..{MAX_YEAR}, got {self.year}")

    @classmethod
    def of(cls, value: date | datetime | Month) -> Month:
        """Return the month containing ``value``; the day is ignored."""

        if isinstance(value, Month):
            return value
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, text: str) -> Month:
        """Parse ``YYYY-MM`` or ``YYYY-MM-DD``."""

        raw = text.strip()
        try:
            if len(raw) == 7:
                parsed = datetime.strptime(raw, "%Y-%m").date()
            else:
                parsed = date.fromisoformat(raw)
        except ValueError as exc:
            raise ValueError(f"Unrecognized month: {text!r}") from exc
        return cls.of(parsed)

    @property
    def ordinal(self) -> int:
        """Months elapsed since January of year 0."""
        return self.year * 12 + (self.month - 1)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> Month:
        year, month_index = divmod(ordinal, 12)
        return cls(year, month_index + 1)

    def shift(self, months: int) -> Month:
        """Return the month ``months`` away (negative moves backwards)."""
        return Month.from_ordinal(self.ordinal + months)

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self) -> str:
        return self.isoformat()


def window_start(anchor: Month, size: int) -> Month:
    """Return the first month of a ``size``-month window ending at ``anchor``.

    Raises:
        InvalidWindow: if ``size`` is not a positive integer or the start month
            would fall outside the supported calendar.
    """

    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidWindow(f"Window size must be a positive integer, got {size!r}")
    try:
        return anchor.shift(-(size - 1))
    except ValueError as exc:
        raise InvalidWindow(
            f"Cannot compute a {size}-month window ending at {anchor}"
        ) from exc


def month_range(start: Month, end: Month) -> Iterator[Month]:
    """Yield every month from ``start`` to ``end`` inclusive, ascending."""

    for ordinal in range(start.ordinal, end.ordinal + 1):
        yield Month.from_ordinal(ordinal)
