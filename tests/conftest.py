"""
Pytest configuration and shared fixtures.

Provides:
- Demo-mode storage (seeded in-memory collections)
- Live-mode storage on an in-memory SQLite database (aiosqlite), using the
  same SQLAlchemy query client as production
- A query client whose every call fails, for error-policy tests
- FastAPI TestClient wired to a demo storage
"""

from __future__ import annotations

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

ROOT = Path(__file__).resolve().parents[1]

# Add project root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Tests never talk to a real database: settings must resolve to demo mode
os.environ.pop("DATABASE_URL", None)
os.environ.pop("POSTGRES_URL", None)
os.environ.pop("METRICS_TOKEN", None)
os.environ.setdefault("OBSERVABILITY_STRUCTURED_LOGS", "false")

import pytest  # noqa: E402 (import after env setup)
from fastapi.testclient import TestClient  # noqa: E402 (import after env setup)
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from ummah_api.db.models import Base  # noqa: E402
from ummah_api.main import create_app  # noqa: E402
from ummah_api.repos.client import SqlAlchemyQueryClient  # noqa: E402
from ummah_api.repos.demo_data import DemoData  # noqa: E402
from ummah_api.repos.storage import Storage  # noqa: E402


# This fixture ensures async fixtures work with AnyIO's pytest plugin.
# Only asyncio is exercised: aiosqlite does not support trio.
@pytest.fixture
def anyio_backend():
    return "asyncio"


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def demo_storage() -> Storage:
    """Storage in demo mode with freshly seeded collections."""
    return Storage(demo_data=DemoData.seeded())


@pytest.fixture
async def sqlite_client() -> AsyncGenerator[SqlAlchemyQueryClient]:
    """
    Query client over a fresh in-memory SQLite database.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    sessionmaker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    yield SqlAlchemyQueryClient(sessionmaker)

    await engine.dispose()


@pytest.fixture
async def live_storage(sqlite_client: SqlAlchemyQueryClient) -> Storage:
    """Storage in live mode backed by SQLite."""
    return Storage(client=sqlite_client)


@pytest.fixture
def failing_client() -> MagicMock:
    """Query client whose every call raises a connection error."""
    client = MagicMock()
    error = ConnectionError("connection refused")
    for method in ("select", "select_with_author", "insert", "update", "delete", "ping"):
        setattr(client, method, AsyncMock(side_effect=error))
    return client


@pytest.fixture
def failing_storage(failing_client: MagicMock) -> Storage:
    """Storage in live mode whose database is unreachable."""
    return Storage(client=failing_client)


# ============================================================================
# API Client Fixtures
# ============================================================================


@pytest.fixture
def client(demo_storage: Storage) -> TestClient:
    """TestClient for an app running on demo storage."""
    return TestClient(create_app(storage=demo_storage))
