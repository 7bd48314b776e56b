"""
Database connection management.
Uses SQLAlchemy for direct connections to the catalog/cart database.
"""

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from storefront.core.config import get_config
from storefront.utils.logger import get_logger

logger = get_logger("data.database")

# Base class for all our database models (must be defined before engine)
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with foreign keys off; cart_items.product_id must reference a product
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(db_url: str, connect_timeout: float = 10.0) -> Engine:
    """
    Create an engine for ``db_url``.

    In-memory SQLite shares one connection so every session sees the same data.
    """
    if db_url.startswith("sqlite"):
        if ":memory:" in db_url or db_url in ("sqlite://", "sqlite+pysqlite://"):
            engine = create_engine(
                db_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(db_url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    # Use NullPool for Supabase transaction/session pooler; the pooler
    # manages connections itself.
    return create_engine(
        db_url,
        pool_pre_ping=True,
        poolclass=NullPool,
        connect_args={"connect_timeout": int(connect_timeout)},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create tables that do not exist yet (local and test databases)."""
    from storefront.data import tables  # noqa: F401  (registers the models)
    Base.metadata.create_all(engine)
    logger.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))


_engine: Optional[Engine] = None


def get_engine() -> Optional[Engine]:
    """Shared engine for DATABASE_URL, or None when it is not configured."""
    global _engine
    if _engine is not None:
        return _engine
    config = get_config()
    if not config.database_url:
        logger.info("DATABASE_URL not set, Supabase REST API will be used")
        return None
    _engine = create_db_engine(config.database_url, config.request_timeout)
    return _engine
