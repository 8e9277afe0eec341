"""Integration tests for the health endpoint and app-wide middleware."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from profilescraper.api.dependencies import get_db
from profilescraper.core.scraping.controller import ScrapeGuard
from profilescraper.main import app
from profilescraper.version import __version__


def override_db(session: MagicMock):
    async def _get_db():
        yield session

    return _get_db


class TestHealthEndpoint:
    """Test health check endpoint functionality."""

    def test_healthy(self):
        """Test health check reports the version when the database answers."""
        session = MagicMock()
        session.execute = AsyncMock()
        app.dependency_overrides[get_db] = override_db(session)
        try:
            response = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "active_scrapes": 0,
            "version": __version__,
        }

    def test_database_unavailable(self):
        """Test health check returns 503 when the database is down."""
        session = MagicMock()
        session.execute = AsyncMock(side_effect=ConnectionRefusedError("connection refused"))
        app.dependency_overrides[get_db] = override_db(session)
        try:
            response = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert "unavailable" in response.json()["detail"].lower()

    def test_reports_active_scrapes(self, monkeypatch):
        """Test that businesses currently being scraped are counted."""
        guard = ScrapeGuard()
        guard.claim("bright-smile")
        monkeypatch.setattr("profilescraper.api.routes.health.scrape_guard", guard)
        session = MagicMock()
        session.execute = AsyncMock()
        app.dependency_overrides[get_db] = override_db(session)
        try:
            response = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert response.json()["active_scrapes"] == 1

    def test_request_id_generated(self):
        """Test that every response carries a request id."""
        session = MagicMock()
        session.execute = AsyncMock()
        app.dependency_overrides[get_db] = override_db(session)
        try:
            response = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert response.headers["X-Request-ID"]


class TestCORS:
    """Test CORS middleware configuration."""

    def test_preflight_request(self):
        """Test that preflight OPTIONS requests are answered for allowed origins."""
        response = TestClient(app).options(
            "/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
