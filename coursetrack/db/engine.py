"""Async SQLAlchemy engine and session factory.

When DATABASE_URL is configured, provides:
- async engine for PostgreSQL via asyncpg
- async session factory for request-scoped sessions
- FastAPI lifespan hook for startup/shutdown

When DATABASE_URL is None (no database configured), the engine and
factory are None and the app falls back to in-memory stores.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager, contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from coursetrack.core.config import SETTINGS
from coursetrack.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


# --- Engine and session factory (None when no DATABASE_URL) ---

if SETTINGS.database_url:
    engine = create_async_engine(
        SETTINGS.database_url,
        echo=SETTINGS.is_dev,  # log SQL in dev only
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
else:
    engine = None
    async_session_factory = None


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session.  Rolls back on exception.

    Stores commit their own writes (each write is one statement), so
    nothing is committed here.
    """
    if async_session_factory is None:
        raise RuntimeError(
            "DATABASE_URL is not configured, cannot create database session"
        )
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise connectivity failures as the retryable StoreUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.exception("Store operation failed: %s", operation)
        raise StoreUnavailableError(f"{operation} failed: store unavailable") from exc


@asynccontextmanager
async def lifespan_db():
    """Startup/shutdown hook for the database engine.

    Call from FastAPI's lifespan context manager.
    """
    if engine is None:
        logger.info("No DATABASE_URL configured, using in-memory stores")
        yield
        return

    logger.info("Database engine created: %s", engine.url)
    yield
    await engine.dispose()
    logger.info("Database engine disposed")
