"""Engine, schema and session scopes for the expense and income tables."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(config: BaseConfig) -> Engine:
    """Build the engine for ``config.DATABASE_URL`` with its engine options."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    logger.debug("Engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_database(engine: Engine) -> list[str]:
    """Create any missing record tables and return the ones that were added."""
    from ..models import ExpenseRow, IncomeRow

    tables = [ExpenseRow.__table__, IncomeRow.__table__]  # type: ignore[attr-defined]
    existing = set(inspect(engine).get_table_names())
    SQLModel.metadata.create_all(engine, tables=tables)
    created = [table.name for table in tables if table.name not in existing]
    if created:
        logger.info("Created tables: %s", ", ".join(created))
    return created


def create_session_factory(engine: Engine) -> SessionFactory:
    """Return a factory of session scopes bound to ``engine``.

    A scope commits when its block exits cleanly and rolls back otherwise.
    Loaded rows keep their attribute values after the scope closes, so they
    can be handed back from a worker thread.
    """

    @contextmanager
    def session_scope() -> Iterator[Session]:
        with Session(engine, expire_on_commit=False) as session:
            try:
                yield session
            except Exception:
                session.rollback()
                raise
            session.commit()

    return session_scope


def bootstrap_database(config: BaseConfig) -> Tuple[Engine, SessionFactory]:
    """Create the engine, make sure the schema exists and return a session factory."""
    engine = create_db_engine(config)
    init_database(engine)
    return engine, create_session_factory(engine)
