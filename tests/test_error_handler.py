"""
Tests for the global error handling middleware.

Mounts the middleware on a small app whose routes fail in each of the ways
the middleware distinguishes.
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from forest_console.infrastructure.api_client import NetworkError, NotFoundError
from forest_console.middleware.error_handler import ErrorHandlerMiddleware


@pytest.fixture
def failing_client() -> TestClient:
    app = FastAPI()
    app.add_middleware(ErrorHandlerMiddleware)

    @app.get("/ok")
    async def ok():
        return {"status": "ok"}

    @app.get("/backend-down")
    async def backend_down():
        raise NetworkError("API request error: connection refused")

    @app.get("/missing")
    async def missing():
        raise NotFoundError(404, "Not Found", "Animal not found")

    @app.get("/bad-value")
    async def bad_value():
        raise ValueError("Unknown filter 'colour' for animals")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    return TestClient(app)


# ============================================================
# Error Mapping Tests
# ============================================================

class TestErrorHandlerMiddleware:
    """Tests for mapping escaped exceptions onto responses."""

    def test_successful_request_passes_through(self, failing_client):
        response = failing_client.get("/ok")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_gateway_error_is_bad_gateway(self, failing_client):
        response = failing_client.get("/backend-down")

        assert response.status_code == 502
        assert response.json() == {
            "error": "Backend API error",
            "detail": "API request error: connection refused",
        }

    def test_not_found_keeps_status(self, failing_client):
        response = failing_client.get("/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "API Error: 404 Not Found"

    def test_value_error_is_bad_request(self, failing_client):
        response = failing_client.get("/bad-value")

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid request",
            "detail": "Unknown filter 'colour' for animals",
        }

    def test_unexpected_error_is_hidden(self, failing_client):
        response = failing_client.get("/crash")

        assert response.status_code == 500
        assert response.json()["detail"] == "An unexpected error occurred"
        assert "boom" not in response.text
