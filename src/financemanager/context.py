"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .domain.records import RecordKind
from .infra.cache import RecordCache
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelRecordStore
from .services.records import RecordRepository


@dataclass
class AppContext:
    """Centralized application context with the wired repositories."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    store: SQLModelRecordStore
    expense_repo: RecordRepository
    income_repo: RecordRepository

    def repository(self, kind: RecordKind) -> RecordRepository:
        """Return the repository for ``kind``."""
        kind = RecordKind(kind)
        return self.expense_repo if kind is RecordKind.EXPENSE else self.income_repo

    def close(self) -> None:
        """Release the store's worker pool and the engine's connections."""
        self.store.close()
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None, *, warm_cache: bool = True) -> AppContext:
    """Create and initialize the application context.

    With ``warm_cache`` both caches load their full history immediately;
    otherwise they load on first use.
    """

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    store = SQLModelRecordStore(session_factory, timeout=config.STORAGE_TIMEOUT)
    expense_cache = RecordCache(store, RecordKind.EXPENSE)
    income_cache = RecordCache(store, RecordKind.INCOME)
    if warm_cache:
        expense_cache.load()
        income_cache.load()

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        store=store,
        expense_repo=RecordRepository(store, expense_cache),
        income_repo=RecordRepository(store, income_cache),
    )
