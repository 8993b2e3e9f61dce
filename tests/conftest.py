"""
Test configuration: a fresh SQLite file database per test, with the app's
get_db dependency pointed at it.
"""
import os
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

# Set testing environment before the app reads its settings
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_personal_manager.db"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["DEFAULT_USERNAME"] = "admin"
os.environ["DEFAULT_PASSWORD"] = "admin"

from personal_manager.deps import get_db
from personal_manager.main import app
from personal_manager.models.db import init_store


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await init_store(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app; every request gets its own session."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def single_connection_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Engine whose pool holds exactly one connection and gives up after 1s."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'single.db'}",
        pool_size=1,
        max_overflow=0,
        pool_timeout=1,
    )
    await init_store(test_engine)
    yield test_engine
    await test_engine.dispose()
