"""Database session configuration"""

import os
import logging
from typing import AsyncGenerator, Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

# Connection pool configuration
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))  # Default 5 connections
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))  # Default 10 overflow
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))  # Default 30 seconds
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))  # Default 1 hour

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def get_async_database_url() -> str:
    """
    Read DATABASE_URL and convert it to the async psycopg driver.

    Supabase PostgreSQL connection string format:
    postgresql://postgres:[PASSWORD]@[HOST]:[PORT]/postgres
    """
    database_url = os.getenv("DATABASE_URL")

    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgresql+psycopg://"):
        return database_url
    if database_url.startswith("postgresql+asyncpg://"):
        # Legacy support: convert asyncpg URLs to psycopg
        return database_url.replace("postgresql+asyncpg://", "postgresql+psycopg://", 1)

    raise ValueError(f"Unsupported database URL format: {database_url}")


def get_engine() -> AsyncEngine:
    """Get or create the async engine (created on first use)"""
    global _engine

    if _engine is None:
        _engine = create_async_engine(
            get_async_database_url(),
            pool_pre_ping=True,  # Verify connections before using them
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
            pool_recycle=POOL_RECYCLE,
            echo=False,
        )
        event.listen(_engine.sync_engine, "invalidate", _on_invalidate)

    return _engine


def get_session_factory() -> async_sessionmaker:
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI routes.

    Usage:
        @app.get("/example")
        async def example(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


def get_pool_stats() -> dict:
    """
    Get current connection pool statistics.

    Returns:
        Dictionary with size, checked_in, checked_out, overflow, invalid
        and max_overflow
    """
    try:
        sync_pool = get_engine().sync_engine.pool

        def _call(name: str, default: int) -> int:
            func = getattr(sync_pool, name, None)
            value = func() if callable(func) else default
            return int(value) if value is not None else default

        return {
            "size": _call("size", POOL_SIZE),
            "checked_in": _call("checkedin", 0),
            "checked_out": _call("checkedout", 0),
            "overflow": max(0, _call("overflow", 0)),
            "invalid": _call("invalid", 0),
            "max_overflow": int(getattr(sync_pool, "_max_overflow", MAX_OVERFLOW)),
        }
    except Exception as e:
        logger.warning(f"Error getting pool stats: {e}")
        # Return safe defaults if pool stats can't be accessed
        return {
            "size": POOL_SIZE,
            "checked_in": 0,
            "checked_out": 0,
            "overflow": 0,
            "invalid": 0,
            "max_overflow": MAX_OVERFLOW,
        }


def _on_invalidate(dbapi_conn, connection_record, exception):
    """Log when a connection is invalidated"""
    logger.warning(
        f"Database connection invalidated: {exception}",
        exc_info=exception
    )
