"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest

from app.core.database import get_db
from app.main import app


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Health endpoint should return status ok."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["environment"] == "development"
    assert data["database"] is None


@pytest.mark.asyncio
async def test_health_check_includes_request_id_header(client):
    """Health endpoint should include X-Request-ID in response."""
    response = await client.get("/health")

    assert "X-Request-ID" in response.headers
    assert len(response.headers["X-Request-ID"]) > 0


@pytest.mark.asyncio
async def test_health_check_uses_provided_request_id(client):
    """Health endpoint should echo back provided X-Request-ID."""
    custom_id = "test-request-id-12345"
    response = await client.get("/health", headers={"X-Request-ID": custom_id})

    assert response.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_readiness_reports_connected_database(client):
    """Readiness should report connected when SELECT 1 succeeds."""
    session = AsyncMock()

    async def override_db():
        yield session

    app.dependency_overrides[get_db] = override_db
    try:
        response = await client.get("/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_readiness_reports_disconnected_database(client):
    """Readiness should degrade to unhealthy when the database fails."""
    session = AsyncMock()
    session.execute.side_effect = ConnectionRefusedError("connection refused")

    async def override_db():
        yield session

    app.dependency_overrides[get_db] = override_db
    try:
        response = await client.get("/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "disconnected"
