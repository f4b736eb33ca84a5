"""SQLite engine and session management for the State Store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from onlinecampus.state_store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY_PATH = ":memory:"

# Seconds a writer waits on another connection's lock before failing
BUSY_TIMEOUT = 10.0


def _configure_connection(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class Database:
    """Owns the SQLAlchemy engine and session factory for one SQLite database.

    Every connection runs in WAL mode with foreign keys enforced. Writers from
    other connections queue on the database lock for up to BUSY_TIMEOUT
    seconds, so racing compare-and-swap updates are serialised instead of
    failing with "database is locked".
    """

    def __init__(
        self, db_path: str = "onlinecampus.db", busy_timeout: float = BUSY_TIMEOUT
    ) -> None:
        """Prepare a database; nothing is opened until first use.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory DB.
            busy_timeout: Seconds to wait for a locked database.
        """
        self.db_path = db_path
        self.busy_timeout = busy_timeout
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY_PATH

    @property
    def url(self) -> str:
        return f"sqlite:///{self.db_path}"

    def _create_engine(self) -> Engine:
        connect_args = {"check_same_thread": False, "timeout": self.busy_timeout}
        if self.in_memory:
            # A single shared connection, otherwise each session sees an empty database
            engine = create_engine(self.url, poolclass=StaticPool, connect_args=connect_args)
        else:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(self.url, connect_args=connect_args)
        event.listen(engine, "connect", _configure_connection)
        return engine

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def get_session(self) -> Session:
        """Open a new session. The caller is responsible for closing it."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory()

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    def table_names(self) -> list[str]:
        return sorted(inspect(self.engine).get_table_names())

    def journal_mode(self) -> str:
        with self.engine.connect() as conn:
            return str(conn.execute(text("PRAGMA journal_mode")).scalar())

    def is_wal_mode(self) -> bool:
        return self.journal_mode() == "wal"

    def close(self) -> None:
        """Dispose of the engine. The next use reconnects."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
