import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .utils import resolve_sqlite_url

# Get DB url
load_dotenv()
# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./dev.db"), ROOT_DIR
)


def _enable_sqlite_transactions(engine: Engine) -> None:
    """Make SQLite honour foreign keys and take the write lock at BEGIN.

    pysqlite defers BEGIN until the first DML statement, so a read followed by
    a write is not atomic. Emitting ``BEGIN IMMEDIATE`` ourselves serializes
    writers for the whole unit of work.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(
    database_url: Optional[str] = None,
    echo: bool = False,
    *,
    connect_args: Optional[dict[str, Any]] = None,
    pool_size: Optional[int] = None,
    pool_timeout: Optional[float] = None,
) -> Engine:
    url = database_url or DEFAULT_SQLITE_URL
    is_sqlite = url.startswith("sqlite")

    options: dict[str, Any] = {"echo": echo, "future": True}
    if connect_args:
        options["connect_args"] = connect_args
    if not is_sqlite:
        # SQLite uses a singleton/static pool that rejects sizing options.
        options["pool_pre_ping"] = True
        if pool_size is not None:
            options["pool_size"] = pool_size
        if pool_timeout is not None:
            options["pool_timeout"] = pool_timeout

    engine = create_engine(url, **options)
    if is_sqlite:
        _enable_sqlite_transactions(engine)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,  # Keep objects readable after the unit of work closes
        future=True,
    )
