"""
Unit tests for the health and status endpoints.

Tests cover:
- Health probe in demo mode, healthy live mode and failing live mode
- Status descriptor for both modes
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from ummah_api.main import create_app
from ummah_api.repos.storage import Storage


@pytest.mark.anyio
async def test_health_ok_in_demo_mode(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "mode": "demo"}


@pytest.mark.anyio
async def test_health_ok_when_ping_succeeds() -> None:
    query_client = MagicMock()
    query_client.ping = AsyncMock(return_value=None)
    client = TestClient(create_app(storage=Storage(client=query_client)))

    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "mode": "live"}
    query_client.ping.assert_awaited_once()


@pytest.mark.anyio
async def test_health_503_when_ping_fails(failing_storage: Storage) -> None:
    client = TestClient(create_app(storage=failing_storage))

    resp = client.get("/api/health")

    assert resp.status_code == 503
    # Don't expose internal error details to callers
    assert resp.json() == {"ok": False, "mode": "live", "db": "unavailable"}


@pytest.mark.anyio
async def test_status_in_demo_mode(client: TestClient) -> None:
    resp = client.get("/api/status")
    assert resp.json() == {
        "postgresql": {"status": "demo-mode", "enabled": False},
        "netlify": {"status": "active", "enabled": True},
    }


@pytest.mark.anyio
async def test_status_in_live_mode(failing_storage: Storage) -> None:
    client = TestClient(create_app(storage=failing_storage))

    resp = client.get("/api/status")

    assert resp.status_code == 200
    assert resp.json()["postgresql"] == {
        "status": "connected",
        "enabled": True,
        "provider": "netlify",
    }
