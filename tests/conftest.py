"""
Shared fixtures for the TrainLog test suite.

Strategy:
- The test FastAPI app is built without startup events (no Postgres).
- get_db is overridden with sessions of an in-memory SQLite database
  (aiosqlite + StaticPool, so every session sees the same data).
- Authenticated clients carry a real JWT created by auth_service.
- The AI service is replaced per test through dependency overrides.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from datetime import datetime
from typing import AsyncGenerator

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.router import api_router
from app.core.base import Base
from app.core.db import get_db
from app.models.user import User
from app.services.auth_service import auth_service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Test app without startup events."""
    test_app = FastAPI(title="TrainLog Test App")
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


def make_auth_headers(user: User) -> dict:
    access_token = auth_service.create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {access_token}"}


async def create_user(session_factory, email: str, password: str = "password123") -> User:
    async with session_factory() as session:
        user = User(
            email=email,
            password=auth_service.hash_password(password),
            created_at=datetime.utcnow(),
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@pytest.fixture
async def user_fixture(session_factory) -> User:
    return await create_user(session_factory, "test@example.com")


@pytest.fixture
async def other_user_fixture(session_factory) -> User:
    return await create_user(session_factory, "other@example.com")


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
def test_app(session_factory) -> FastAPI:
    app = create_test_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous client."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(test_app, user_fixture) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as user_fixture."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        headers=make_auth_headers(user_fixture),
    ) as ac:
        yield ac


@pytest.fixture
async def other_client(test_app, other_user_fixture) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as a second, unrelated user."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        headers=make_auth_headers(other_user_fixture),
    ) as ac:
        yield ac
