"""Relational store: declarative base, engine/pool, transactional sessions.

One ``Database`` is created per process and shared by every request; the
engine's connection pool is the only long-lived resource.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import structlog
from sqlalchemy import Engine, Numeric, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from shared.config import get_settings
from shared.errors import PersistenceError

logger = structlog.get_logger(__name__)


def new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    type_annotation_map = {
        Decimal: Numeric(12, 2),
    }


def _configure_sqlite(engine: Engine) -> None:
    """Give SQLite write transactions lock-on-begin semantics.

    pysqlite defers BEGIN until the first write, which lets two transactions
    read the same stock and then race for the write lock. Emitting
    BEGIN IMMEDIATE serializes writers from the first statement instead.
    Connections carrying the ``read_only`` execution option begin DEFERRED
    so readers never queue behind writers.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get("read_only"):
            conn.exec_driver_sql("BEGIN DEFERRED")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _configure_sqlite(engine)
        return engine
    return create_engine(url, echo=echo, pool_pre_ping=True)


class Database:
    """Engine plus session factory, with storage errors mapped to PersistenceError."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_db_engine(url, echo=echo)
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)
        self.read_session_factory = sessionmaker(self.engine.execution_options(read_only=True), expire_on_commit=False)

    @contextmanager
    def transaction(self, read_only: bool = False) -> Iterator[Session]:
        """Yield a session inside one transaction; commit on success, roll back on error.

        ``read_only`` units take no write lock up front on SQLite and must
        not write.
        """
        session = self.read_session_factory() if read_only else self.session_factory()
        try:
            with session.begin():
                yield session
        except SQLAlchemyError as exc:
            logger.error("Storage transaction failed", error=str(exc), exc_info=True)
            raise PersistenceError() from exc
        finally:
            session.close()

    def setup_db(self) -> None:
        """Create all tables."""
        # Models register themselves on Base.metadata when imported
        import catalogue.models  # noqa: F401
        import identity.models  # noqa: F401
        import ordering.models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def drop_db(self) -> None:
        """Drop all tables."""
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


_current_database: Database | None = None


def get_database() -> Database:
    """Return the process-wide database, creating it from settings on first use."""
    global _current_database
    if _current_database is None:
        settings = get_settings()
        _current_database = Database(settings.database_url, echo=settings.database_echo)
    return _current_database


def set_database(database: Database) -> None:
    """Override the active database (useful for tests)."""
    global _current_database
    _current_database = database


def reset_database() -> None:
    """Dispose of the active database and forget it."""
    global _current_database
    if _current_database is not None:
        _current_database.dispose()
    _current_database = None
