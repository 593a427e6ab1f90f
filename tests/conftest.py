"""Pytest configuration and fixtures."""

import os
import sys

import pytest
import pytest_asyncio

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing application modules
os.environ.setdefault("HH_CLIENT_ID", "test_client_id")
os.environ.setdefault("HH_CLIENT_SECRET", "test_client_secret")
os.environ.setdefault("HH_REDIRECT_URI", "http://localhost:8000/auth/callback")
os.environ.setdefault("HH_EMPLOYER_ID", "42")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ["HH_API_BASE"] = "https://api.hh.ru"
os.environ["HH_ACCESS_TOKEN"] = ""
os.environ["QUEUE_ENABLED"] = "false"
os.environ["SYNC_ENABLED"] = "false"
os.environ["ISSUE_PROJECT_NAME"] = "Hire"
os.environ["ISSUE_AUTHOR_ID"] = "7"

from tests.support import FakeHH, FakeTokenProvider  # noqa: E402


@pytest.fixture
def fake_hh():
    """Scripted remote API."""
    return FakeHH()


@pytest.fixture
def token_provider():
    return FakeTokenProvider()


@pytest_asyncio.fixture
async def hh_client(fake_hh, token_provider):
    """HH client wired to the scripted remote API."""
    from hiresync.services.hh_client import HHClient

    client = HHClient(
        token_provider=token_provider,
        employer_id="42",
        transport=fake_hh.transport(),
    )
    yield client
    await client.close()


@pytest_asyncio.fixture
async def session_factory():
    """Session factory bound to a fresh in-memory database."""
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from hiresync.core.storage import init_models

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def test_client():
    """API client with dependency overrides cleared after each test."""
    from fastapi.testclient import TestClient

    from hiresync.main import app

    yield TestClient(app)
    app.dependency_overrides.clear()
