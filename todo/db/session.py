"""Async database engine, schema bootstrap and session management.

One engine (and therefore one connection pool) exists per process. It is
created lazily on first use and shared by every request; each request gets
its own ``AsyncSession`` from :func:`get_db`.

Transaction pattern
-------------------

**get_db()** commits when the endpoint returns and rolls back when it raises,
so a saved item is durable before the response is sent::

    @router.post("/save")
    async def save_item(
        db: Annotated[AsyncSession, Depends(get_db)],
        item: Annotated[str, Form()] = "",
    ) -> RedirectResponse:
        await ItemService.create(db, ItemCreate(text=item))
        ...

**get_db_no_commit()** is for read-only probes that never write.
"""

import logging
from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todo.config.settings import get_settings
from todo.db.base import Base

logger = logging.getLogger(__name__)


@lru_cache
def get_engine() -> AsyncEngine:
    """Get the database engine (lazily initialized).

    Pool sizing only applies to server databases; SQLite picks its own pool.
    """
    settings = get_settings()
    engine_kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if settings.database_dialect != "sqlite":
        engine_kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
            pool_pre_ping=True,
        )
    engine = create_async_engine(settings.async_database_url, **engine_kwargs)

    if settings.database_dialect == "postgresql":
        # SET doesn't take bind parameters; the value is a validated integer
        @event.listens_for(engine.sync_engine, "connect")
        def set_statement_timeout(  # pyright: ignore[reportUnusedFunction]
            dbapi_connection: object, connection_record: object
        ) -> None:
            cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
            cursor.execute(
                f"SET statement_timeout = {settings.database_statement_timeout}"
            )
            cursor.close()

    return engine


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the async session factory (lazily initialized)."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create the items table if it does not exist yet.

    Safe to call any number of times against the same database.
    """
    # Registers the models on Base.metadata
    from todo.items import models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Database schema ready")


async def get_db() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency that provides a database session.

    Yields an async session and handles commit/rollback automatically.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def get_db_no_commit() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency that provides a database session without auto-commit."""
    async with get_session_factory()() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise
