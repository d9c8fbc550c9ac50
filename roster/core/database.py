"""Database configuration and session management for SQLite.

This module configures the SQLite database engine backing the record store:
WAL mode so the nightly generation job can write while the API reads, and
foreign key enforcement so registrations always point at a real event.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while writing.
      The generation job holds a write transaction per event; without WAL
      every API read would block on it.

    - **Foreign Keys**: Disabled by default in SQLite. Enabled so that a
      Registration cannot reference a missing Event.

    - **timeout**: SQLite waits this many seconds for a competing writer
      before raising ``database is locked``. This is the timeout budget for
      every store call; a timed-out event is left pending for the next run.

    - **check_same_thread=False**: FastAPI's dependency injection and the
      scheduler may use a connection from a thread other than its creator.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from roster.core.config import settings

connect_args = {
    "check_same_thread": False,
    "timeout": settings.store_timeout_seconds,
}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
