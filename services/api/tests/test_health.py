"""Tests for health endpoint and error rendering."""

import pytest
from httpx import AsyncClient

from app import main as main_module


async def _ok() -> None:
    return None


async def _down() -> None:
    raise ConnectionError("connection refused")


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    """Test health endpoint returns ok when both stores answer."""
    monkeypatch.setattr(main_module, "ping_db", _ok)
    monkeypatch.setattr(main_module, "ping_redis", _ok)

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_health_check_postgres_down(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(main_module, "ping_db", _down)
    monkeypatch.setattr(main_module, "ping_redis", _ok)

    response = await client.get("/health")
    assert response.status_code == 503
    assert response.json()["error"]["code"] == "POSTGRES_UNAVAILABLE"


@pytest.mark.asyncio
async def test_health_check_redis_down(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(main_module, "ping_db", _ok)
    monkeypatch.setattr(main_module, "ping_redis", _down)

    response = await client.get("/health")
    assert response.status_code == 503
    body = response.json()
    assert body["error"]["code"] == "REDIS_UNAVAILABLE"
    assert body["error"]["message"] == "Redis unavailable"


@pytest.mark.asyncio
async def test_health_check_stores_not_initialized(client: AsyncClient):
    """Without startup, the stores raise RuntimeError and health reports 503."""
    response = await client.get("/health")
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_dashboard_page_served(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert "SaaS Usage Dashboard" in html
    assert 'fetch("/metrics"' in html
    assert "2000" in html


@pytest.mark.asyncio
async def test_unknown_route_returns_structured_404(client: AsyncClient):
    response = await client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {
        "error": {"code": "NOT_FOUND", "message": "Not Found", "detail": None}
    }


@pytest.mark.asyncio
async def test_wrong_method_on_metrics_returns_structured_405(client: AsyncClient):
    response = await client.post("/metrics")
    assert response.status_code == 405
    assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"
