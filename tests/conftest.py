"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

# Set test environment before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todo.db.session import get_db, get_db_no_commit, init_db
from todo.main import app


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file database, one per test.

    A file (rather than :memory:) gives every session its own connection,
    which lets concurrent requests commit independently.
    """
    return f"sqlite+aiosqlite:///{tmp_path / 'todo.db'}"


@pytest_asyncio.fixture
async def test_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create test database engine with the items table in place."""
    engine = create_async_engine(database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def bare_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Engine for a database that was never bootstrapped."""
    engine = create_async_engine(database_url)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session


async def _client_for(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_no_commit] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    """Create test client whose requests each get their own session."""
    async for ac in _client_for(session_factory):
        yield ac


@pytest_asyncio.fixture
async def broken_client(bare_engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """Test client backed by a database without the items table."""
    factory = async_sessionmaker(bare_engine, class_=AsyncSession)
    async for ac in _client_for(factory):
        yield ac
