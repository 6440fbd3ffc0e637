"""Pytest configuration and shared fixtures for FinanceManager tests.

This module provides database fixtures, record factories and an in-memory
store double for testing the cache, repository and aggregation layers without
touching the real application database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from financemanager.models import ExpenseRow, IncomeRow  # noqa: F401
from financemanager.domain.errors import MalformedRecord, StorageUnavailable
from financemanager.domain.month import Month
from financemanager.domain.records import Expense, Income, RecordKind, natural_order, record_type
from financemanager.domain.repositories.record_store import FetchResult, InsertResult
from financemanager.infra.cache import RecordCache
from financemanager.infra.database import create_session_factory
from financemanager.infra.repositories import SQLModelRecordStore
from financemanager.services.records import RecordRepository


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    A file (not ``:memory:``) is used because store calls run on worker
    threads, and each ``:memory:`` connection would see its own empty database.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the application wires up."""
    return create_session_factory(db_engine)


@pytest.fixture
def store(session_factory):
    """SQLModel record store backed by the per-test database."""
    record_store = SQLModelRecordStore(session_factory, timeout=5.0)
    yield record_store
    record_store.close()


@pytest.fixture
def expense_repo(store) -> RecordRepository:
    return RecordRepository(store, RecordCache(store, RecordKind.EXPENSE))


@pytest.fixture
def income_repo(store) -> RecordRepository:
    return RecordRepository(store, RecordCache(store, RecordKind.INCOME))


# =============================================================================
# Test Data Factories
# =============================================================================


def _first_day(month: str | date) -> date:
    if isinstance(month, date):
        return month
    return Month.parse(month).first_day()


@pytest.fixture
def expense_factory():
    """Factory for expense records.

    Returns:
        Callable: Function building an ``Expense`` for a ``YYYY-MM`` month
    """

    def _create_expense(month: str | date = "2024-01", **amounts: float) -> Expense:
        return Expense(date=_first_day(month), **amounts)

    return _create_expense


@pytest.fixture
def income_factory():
    """Factory for income records.

    Returns:
        Callable: Function building an ``Income`` for a ``YYYY-MM`` month
    """

    def _create_income(month: str | date = "2024-01", **amounts: float) -> Income:
        return Income(date=_first_day(month), **amounts)

    return _create_income


# =============================================================================
# Store double
# =============================================================================


class InMemoryRecordStore:
    """Record store double with switchable failures and call counters."""

    def __init__(self) -> None:
        self.rows: dict[RecordKind, list] = {kind: [] for kind in RecordKind}
        self.fail_fetch = False
        self.fail_insert = False
        self.fetch_all_calls = 0
        self.fetch_window_calls = 0
        self.insert_calls = 0

    def _unavailable(self, kind: RecordKind, operation: str) -> StorageUnavailable:
        return StorageUnavailable(f"{operation} on {kind.value} failed", kind=kind.value, operation=operation)

    def fetch_all(self, kind: RecordKind) -> FetchResult:
        self.fetch_all_calls += 1
        if self.fail_fetch:
            return FetchResult(error=self._unavailable(kind, "fetch_all"))
        return FetchResult(records=tuple(natural_order(self.rows[kind])))

    def fetch_window(self, kind: RecordKind, anchor_month: Month, count: int) -> FetchResult:
        self.fetch_window_calls += 1
        if self.fail_fetch:
            return FetchResult(error=self._unavailable(kind, "fetch_window"))
        eligible = [record for record in self.rows[kind] if record.month <= anchor_month]
        return FetchResult(records=tuple(natural_order(eligible)[:count]))

    def insert(self, kind: RecordKind, record) -> InsertResult:
        self.insert_calls += 1
        if not isinstance(record, record_type(kind)):
            return InsertResult(record=record, error=MalformedRecord("wrong kind"))
        if self.fail_insert:
            return InsertResult(record=record, error=self._unavailable(kind, "insert"))
        self.rows[kind].append(record)
        return InsertResult(record=record)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()
