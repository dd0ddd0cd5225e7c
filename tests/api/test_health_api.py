"""Tests for the health endpoints."""

from unittest.mock import AsyncMock

from docqa.boundary.db import get_async_db


def test_health_should_report_healthy(client) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_db_health_should_report_ok(app, client) -> None:
    session = AsyncMock()
    app.dependency_overrides[get_async_db] = lambda: session

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    session.execute.assert_awaited_once()


def test_db_health_should_report_unreachable_database(app, client) -> None:
    session = AsyncMock()
    session.execute.side_effect = ConnectionError("refused")
    app.dependency_overrides[get_async_db] = lambda: session

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "message": "Database unreachable"}
