"""Tests for the health endpoint and its cache."""

import pytest
from httpx import ASGITransport, AsyncClient

from src.sparkhub import main

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def clear_health_cache(monkeypatch):
    monkeypatch.setattr(main, "_health_cache", None)
    monkeypatch.setattr(main, "_health_cache_time", 0)


@pytest.fixture
async def client():
    app = main.create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def test_healthy_without_redis(client, monkeypatch):
    async def _no_redis():
        return None

    monkeypatch.setattr(main, "get_redis", _no_redis)

    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["redis"] == "not_configured"
    assert data["cached"] is False


async def test_second_call_served_from_cache(client, monkeypatch, fake_redis):
    async def _redis():
        return fake_redis

    monkeypatch.setattr(main, "get_redis", _redis)

    first = await client.get("/health")
    assert first.json()["redis"] == "healthy"

    second = await client.get("/health")
    assert second.json()["cached"] is True
    assert second.json()["timestamp"] == first.json()["timestamp"]


async def test_redis_failure_degrades(client, monkeypatch):
    class BrokenRedis:
        async def ping(self):
            raise ConnectionError("connection refused")

    async def _redis():
        return BrokenRedis()

    monkeypatch.setattr(main, "get_redis", _redis)

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["redis"].startswith("unhealthy")


async def test_database_failure_is_unhealthy(client, monkeypatch):
    class BrokenSession:
        async def __aenter__(self):
            raise OSError("database is down")

        async def __aexit__(self, *exc):
            return False

    async def _no_redis():
        return None

    monkeypatch.setattr(main, "get_session", lambda: BrokenSession())
    monkeypatch.setattr(main, "get_redis", _no_redis)

    response = await client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


async def test_metrics_exposed(client):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "sparkhub_consistency_errors_total" in response.text
