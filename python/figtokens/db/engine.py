"""Database engine for the token store.

Deployments use PostgreSQL through psycopg. SQLite also works for local
runs and the test suite, with these connection settings applied:
- PRAGMA foreign_keys=ON, so deleting a design file cascades to its tokens
- pysqlite's implicit transactions disabled and BEGIN emitted explicitly,
  so the per-file SAVEPOINT used on insert conflicts behaves
- in-memory databases share a single connection across threads
"""

from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import StaticPool

from figtokens.config import get_settings


def _is_in_memory(url: URL) -> bool:
    return url.database in (None, "", ":memory:")


def _enable_sqlite_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create an engine for `database_url`, defaulting to DATABASE_URL."""
    url = make_url(database_url or get_settings().database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool if _is_in_memory(url) else None,
    )
    _enable_sqlite_transactions(engine)
    return engine


@lru_cache
def get_engine() -> Engine:
    return create_db_engine()
