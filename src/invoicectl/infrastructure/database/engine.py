"""Database engine setup.

Any SQLAlchemy URL is accepted. For SQLite (the default), the engine
enables WAL mode and foreign keys on every new connection, and the
parent directory of the database file is created on init.

SQLAlchemy Core (not ORM) is used: each invoice write is a single
statement, so there is nothing for a session or identity map to do.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from invoicectl.infrastructure.database.schema import metadata


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for *url*; SQLite gets WAL mode and foreign keys."""
    engine = create_engine(url, echo=echo)

    if _is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_database(url: str, *, echo: bool = False) -> Engine:
    """Initialize the database at *url* and return a ready engine.

    For file-backed SQLite, creates the parent directory first. Creates
    all tables from :data:`schema.metadata`.

    Idempotent — safe to call on an existing database.
    """
    if _is_sqlite(url):
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(url, echo=echo)
    metadata.create_all(engine)
    return engine
