import psycopg
from flask import current_app, g
from psycopg_pool import ConnectionPool

from .config import Config
from .errors import StoreError
from .store import PlatformStore

# Connection pool - shared across requests
_pool: ConnectionPool | None = None


def get_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        _pool = ConnectionPool(
            Config.DATABASE_URL,
            min_size=1,
            max_size=10,
            kwargs={"autocommit": True},  # every statement here is a point read or a single append
            open=True,
        )
    return _pool


def get_db():
    """Get a database connection for the current request.

    Raises StoreError when no connection can be acquired (PoolTimeout is a
    psycopg OperationalError).
    """
    if "db" not in g:
        try:
            g.db = get_pool().getconn()
        except psycopg.Error as e:
            raise StoreError(str(e), getattr(e, "sqlstate", None)) from e
    return g.db


def get_store():
    """Get the platform store for the current request.

    ``app.config["PLATFORM_STORE"]`` replaces the PostgreSQL store when set
    (used by tests and local tooling).
    """
    override = current_app.config.get("PLATFORM_STORE")
    if override is not None:
        return override
    if "store" not in g:
        g.store = PlatformStore(get_db())
    return g.store


def close_db(exc=None):
    """Return connection to pool at end of request."""
    g.pop("store", None)
    db = g.pop("db", None)
    if db is not None:
        get_pool().putconn(db)


def init_app(app):
    app.teardown_appcontext(close_db)
