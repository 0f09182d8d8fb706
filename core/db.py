"""
core/db.py -- SQLAlchemy engine construction shared by every store.

Both auth/store.py and items/store.py build their engine here so they get
identical SQLite settings. Each store still owns its own tables and engine;
pointing two stores at the same DATABASE_URL is the normal setup.

Layer rule: core/ is the kernel -- no imports from api/, auth/, or items/.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("stockroom.db")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine, applying SQLite-specific settings when relevant.

    check_same_thread=False: route handlers run on FastAPI's thread pool, so
    a pooled SQLite connection may be used from a thread other than the one
    that opened it.
    """
    connect_args: dict = {}
    is_sqlite = db_url.startswith("sqlite")
    if is_sqlite:
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args, pool_pre_ping=not is_sqlite)
    if is_sqlite:
        event.listen(engine, "connect", _set_wal_mode)
    return engine


def ping(engine: Engine) -> bool:
    """Return True if the database answers SELECT 1. Failures are logged, not raised."""
    try:
        with engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError:
        logger.exception("Database ping failed")
        return False
