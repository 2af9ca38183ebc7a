"""
Test suite for health check endpoints.

System role: Verification of liveness and database readiness probes
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from training_backend.api.routers.health import router
from training_backend.boundary.db import get_async_db


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(db: AsyncMock) -> TestClient:
    """Provide TestClient with the database dependency mocked."""
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_async_db] = lambda: db
    return TestClient(app)


class TestHealthEndpoints:
    """Test suite for /health and /health/db."""

    def test_health_returns_healthy(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_db_health_runs_probe_query(self, client: TestClient, db: AsyncMock) -> None:
        response = client.get("/health/db")

        assert response.status_code == 200
        db.execute.assert_awaited_once()

    def test_db_health_returns_503_when_unreachable(self, client: TestClient, db: AsyncMock) -> None:
        """Test database errors are reported as service unavailable."""
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = client.get("/health/db")

        assert response.status_code == 503
