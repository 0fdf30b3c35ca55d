"""
core/database.py -- Engine construction shared by every store.

One Engine (and therefore one connection pool) is created per process in the
FastAPI lifespan and passed explicitly into UserStore and CatalogStore. There
is no module-level connection object.

SQLite connections get three per-connection PRAGMAs, because SQLite PRAGMAs
are not inherited by new connections from the pool:
  journal_mode=WAL  readers proceed without blocking during writes
  foreign_keys=ON   books.publisher_id / books.author_id are enforced by the
                    store, not by application code

Layer rule: core/ is the kernel. No imports from api/, auth/, or catalog/.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(db_url: str) -> Engine:
    """Build the process-wide Engine for db_url.

    check_same_thread=False is required for SQLite because FastAPI runs sync
    route handlers in a thread pool; pool_pre_ping keeps long-lived MySQL
    connections from failing after a server-side idle timeout.
    """
    connect_args: dict = {}
    kwargs: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    else:
        kwargs["pool_pre_ping"] = True
    engine = create_engine(db_url, connect_args=connect_args, **kwargs)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine
