"""SQLModel implementation of the record store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, select

from ...domain.errors import MalformedRecord, StorageUnavailable
from ...domain.month import Month
from ...domain.records import Record, RecordKind, record_type
from ...domain.repositories.record_store import FetchResult, InsertResult
from ...logging_config import get_logger
from ...models import ExpenseRow, IncomeRow
from ..database import SessionFactory

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_TIMEOUT = 5.0

ROW_TYPES: dict[RecordKind, type[SQLModel]] = {
    RecordKind.EXPENSE: ExpenseRow,
    RecordKind.INCOME: IncomeRow,
}

T = TypeVar("T")


def row_to_record(kind: RecordKind, row: Any) -> Record:
    """Parse a stored row into an immutable record.

    Raises:
        MalformedRecord: if the date is not ``yyyy-MM-dd`` or an amount is not numeric.
    """

    cls = record_type(kind)
    try:
        parsed_date = datetime.strptime(str(row.date), DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(f"{kind.value} row {row.id}: bad date {row.date!r}") from exc

    amounts: dict[str, float] = {}
    for name in cls.CATEGORY_FIELDS:
        raw = getattr(row, name)
        try:
            amounts[name] = float(raw)
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(f"{kind.value} row {row.id}: {name} is not numeric ({raw!r})") from exc
    return cls(date=parsed_date, **amounts)


def record_to_row(kind: RecordKind, record: Record) -> SQLModel:
    row_type = ROW_TYPES[kind]
    return row_type(date=record.date.strftime(DATE_FORMAT), **record.categories())


def _month_upper_bound(month: Month) -> str:
    # ISO dates compare lexicographically; "-31" sorts after every day of the month.
    return f"{month.isoformat()}-31"


class SQLModelRecordStore:
    """SQLModel-backed store for expense and income rows.

    Every call runs on a worker thread and is bounded by ``timeout`` seconds.
    An insert that has already started when the timeout expires is waited on,
    so a failed ``InsertResult`` always means no row was written.
    Failures never raise: fetches return an empty ``FetchResult`` carrying a
    ``StorageUnavailable`` and inserts return a failed ``InsertResult``.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """Initialize with a session factory."""
        self.session_factory = session_factory
        self.timeout = timeout
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="record-store"
        )

    def close(self) -> None:
        """Shut down the worker pool if this store created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # Queries ----------------------------------------------------------------

    def fetch_all(self, kind: RecordKind) -> FetchResult:
        """Return every stored record of ``kind``, most recent first."""
        kind = RecordKind(kind)
        row_type = ROW_TYPES[kind]
        statement = select(row_type).order_by(
            row_type.date.desc(), row_type.id  # type: ignore[attr-defined]
        )
        return self._fetch(kind, statement, operation="fetch_all")

    def fetch_window(self, kind: RecordKind, anchor_month: Month, count: int) -> FetchResult:
        """Return at most ``count`` records dated in or before ``anchor_month``."""
        kind = RecordKind(kind)
        if count <= 0:
            return FetchResult()
        row_type = ROW_TYPES[kind]
        anchor = Month.of(anchor_month)
        statement = (
            select(row_type)
            .where(row_type.date <= _month_upper_bound(anchor))  # type: ignore[attr-defined]
            .order_by(row_type.date.desc(), row_type.id)  # type: ignore[attr-defined]
            .limit(count)
        )
        return self._fetch(kind, statement, operation="fetch_window")

    def insert(self, kind: RecordKind, record: Record) -> InsertResult:
        """Persist ``record`` as a new row of ``kind``."""
        kind = RecordKind(kind)
        if not isinstance(record, record_type(kind)):
            error = MalformedRecord(
                f"Cannot store {type(record).__name__} as {kind.value}"
            )
            logger.error("Rejected insert: %s", error)
            return InsertResult(record=record, error=error)

        row = record_to_row(kind, record)
        try:
            self._run(
                self._write_row, row, kind=kind, operation="insert", settle_in_flight=True
            )
        except StorageUnavailable as exc:
            logger.error(
                "Could not insert %s in database",
                kind.value,
                exc_info=exc,
                extra={"kind": kind.value, "operation": "insert"},
            )
            return InsertResult(record=record, error=exc)
        logger.debug("Inserted %s for %s", kind.value, record.date)
        return InsertResult(record=record)

    # Internals --------------------------------------------------------------

    def _fetch(self, kind: RecordKind, statement, *, operation: str) -> FetchResult:
        try:
            rows = self._run(self._read_rows, statement, kind=kind, operation=operation)
        except StorageUnavailable as exc:
            logger.error(
                "Could not load %s rows from database",
                kind.value,
                exc_info=exc,
                extra={"kind": kind.value, "operation": operation},
            )
            return FetchResult(error=exc)

        records: list[Record] = []
        skipped = 0
        for row in rows:
            try:
                records.append(row_to_record(kind, row))
            except MalformedRecord as exc:
                skipped += 1
                logger.warning("Skipping malformed row: %s", exc)
        if skipped:
            logger.warning(
                "Skipped %d malformed %s row(s)",
                skipped,
                kind.value,
                extra={"kind": kind.value, "operation": operation, "skipped": skipped},
            )
        return FetchResult(records=tuple(records), skipped=skipped)

    def _read_rows(self, statement) -> list[Any]:
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def _write_row(self, row: SQLModel) -> None:
        with self.session_factory() as session:
            session.add(row)
            session.commit()

    def _run(
        self,
        func: Callable[..., T],
        *args: Any,
        kind: RecordKind,
        operation: str,
        settle_in_flight: bool = False,
    ) -> T:
        """Run ``func`` on the worker pool, translating failures to ``StorageUnavailable``.

        With ``settle_in_flight`` a call that already started when the timeout
        expires is waited on until it commits or rolls back; only a call that
        never left the queue is reported as timed out.
        """
        future = self._executor.submit(func, *args)
        try:
            try:
                return future.result(timeout=self.timeout)
            except FutureTimeout as exc:
                if future.cancel() or not settle_in_flight:
                    raise StorageUnavailable(
                        f"{operation} on {kind.value} timed out after {self.timeout}s",
                        kind=kind.value,
                        operation=operation,
                    ) from exc
                logger.warning(
                    "%s on %s still running after %ss, waiting for it to finish",
                    operation,
                    kind.value,
                    self.timeout,
                    extra={"kind": kind.value, "operation": operation},
                )
                # Bounded by the sqlite busy timeout set on the engine.
                return future.result()
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            # Driver-level conversion errors surface as TypeError/ValueError.
            raise StorageUnavailable(
                f"{operation} on {kind.value} failed: {exc}",
                kind=kind.value,
                operation=operation,
            ) from exc
