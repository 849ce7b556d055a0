"""
Database Configuration

Async SQLAlchemy engine, session factory and the declarative base shared by
all models. Also provides ``transaction``, the unit of work used by every
multi-statement write.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable
from contextlib import asynccontextmanager
from typing import TypeVar

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from bursary.core.config import settings
from bursary.core.exceptions import StoreTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
    pool_recycle=300,
)

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """Verify the database is reachable. Schema is managed by Alembic."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    await engine.dispose()


@asynccontextmanager
async def transaction(
    db: AsyncSession,
    operation: str,
    timeout: float | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Run a block of statements as one unit of work.

    Commits when the block exits cleanly and rolls back on any exception.
    The whole block, commit included, is bounded by ``timeout`` seconds
    (``DB_OPERATION_TIMEOUT_SECONDS`` by default); on expiry the work is
    rolled back and ``StoreTimeoutError`` is raised.

    Usage:
        async with transaction(db, "activate_admin"):
            await repository.mark_activated(db, ...)
            await repository.delete_invitation(db, ...)
    """
    limit = timeout if timeout is not None else settings.db_operation_timeout_seconds
    try:
        async with asyncio.timeout(limit):
            yield db
            await db.commit()
    except TimeoutError as e:
        await db.rollback()
        logger.error(f"Transaction '{operation}' exceeded {limit}s and was rolled back")
        raise StoreTimeoutError(operation) from e
    except BaseException:
        await db.rollback()
        raise


async def bounded(awaitable: Awaitable[T], operation: str, timeout: float | None = None) -> T:
    """Await a single store read, failing fast with ``StoreTimeoutError``."""
    limit = timeout if timeout is not None else settings.db_operation_timeout_seconds
    try:
        async with asyncio.timeout(limit):
            return await awaitable
    except TimeoutError as e:
        logger.error(f"Store read '{operation}' exceeded {limit}s")
        raise StoreTimeoutError(operation) from e
