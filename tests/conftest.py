"""Shared fixtures: a fresh in-memory database per test and an in-process API client."""

import os
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SEED_CATEGORIES", "false")

import httpx
import pytest_asyncio
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from taskboard.client.api import TaskboardApi
from taskboard.database import build_engine, build_session_factory, get_db
from taskboard.main import app
from taskboard.models import Category


@pytest_asyncio.fixture
async def engine():
    """Isolated in-memory SQLite database with all tables created."""
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def transport(session_factory):
    """ASGI transport into the app, each request getting its own session."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield httpx.ASGITransport(app=app)
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(transport) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api(transport) -> AsyncGenerator[TaskboardApi, None]:
    """Typed client for the /api routes."""
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api") as http:
        yield TaskboardApi(client=http)


@pytest_asyncio.fixture
async def category(session_factory) -> Category:
    async with session_factory() as session:
        category = Category(name="Errands", color="#3b82f6")
        session.add(category)
        await session.commit()
        await session.refresh(category)
    return category
