import logging
import os
import time
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from . import config

logger = logging.getLogger(__name__)

# Get environment-specific pool settings
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
ENABLE_QUERY_LOGGING = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

# Process-wide engine, built on first use
_engine: Optional[Engine] = None


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # SQLite connections are handed between the threadpool workers
        engine = create_engine(url, connect_args={"check_same_thread": False}, echo=False)

        # SQLite's built-in lower() folds ASCII only; ilike() relies on it for Vietnamese text
        @event.listens_for(engine, "connect")
        def register_unicode_lower(dbapi_conn, _record):
            dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=POOL_RECYCLE,
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
            echo=False,
        )
        logger.info(
            f"📊 Connection pool: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s"
        )

    # Slow query logging for performance monitoring
    if ENABLE_QUERY_LOGGING:

        @event.listens_for(engine, "before_cursor_execute")
        def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            conn.info.setdefault("query_start_time", []).append(time.time())

        @event.listens_for(engine, "after_cursor_execute")
        def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
            total = time.time() - conn.info["query_start_time"].pop(-1)
            if total > SLOW_QUERY_THRESHOLD:
                logger.warning(f"🐌 Slow query ({total:.2f}s): {statement[:200]}...")

    return engine


def get_engine() -> Engine:
    """Return the shared engine, creating it (and binding SessionLocal) on first call"""
    global _engine
    if _engine is None:
        try:
            _engine = _create_engine(config.DATABASE_URL)
            SessionLocal.configure(bind=_engine)
            logger.info("✅ Database engine created successfully")
        except Exception as e:
            logger.error(f"❌ Failed to create database engine: {e}")
            raise
    return _engine


def reset_engine(url: Optional[str] = None) -> Engine:
    """Dispose the current engine and rebuild it, optionally against a new URL"""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
    if url is not None:
        config.DATABASE_URL = url
    return get_engine()


def init_db() -> None:
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine(), checkfirst=True)


def new_session():
    get_engine()
    return SessionLocal()


def get_db():
    db = new_session()
    try:
        yield db
    finally:
        db.close()
