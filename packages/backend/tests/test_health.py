"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_reports_database(client):
    """Health endpoint should return server status, version and DB state."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_degraded_without_redis(client):
    """Redis is never connected in tests, which only degrades the service."""
    data = (await client.get("/api/health")).json()
    assert data["redis"].startswith("error")
    assert data["status"] == "degraded"


@pytest.mark.asyncio
async def test_ping(client):
    resp = await client.get("/api/test")
    assert resp.status_code == 200
    assert "GameHound" in resp.json()["message"]
