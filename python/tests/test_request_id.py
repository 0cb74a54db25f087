"""Tests for X-Request-ID middleware.

Tests cover:
- Request ID generation when missing
- Request ID preservation when valid
- Request ID normalization (UUID lowercase)
- Request ID replacement when invalid
- Request ID in error response body
"""

from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from figtokens.app import add_request_id_middleware
from figtokens.middleware.request_id import is_valid_request_id, normalize_request_id


@pytest.fixture
def request_id_client(app):
    """Create a client with request-id middleware."""
    add_request_id_middleware(app, log_requests=False)
    with TestClient(app) as client:
        yield client


class TestRequestIdMiddleware:
    """Tests for X-Request-ID middleware."""

    def test_request_id_generated_when_missing(self, request_id_client: TestClient):
        response = request_id_client.get("/health")

        assert response.status_code == 200
        UUID(response.headers["X-Request-ID"])  # Raises if invalid

    def test_request_id_preserved_when_valid(self, request_id_client: TestClient):
        response = request_id_client.get("/health", headers={"X-Request-ID": "abc_def-123"})
        assert response.headers["X-Request-ID"] == "abc_def-123"

    def test_uuid_request_id_lowercased(self, request_id_client: TestClient):
        upper = str(uuid4()).upper()

        response = request_id_client.get("/health", headers={"X-Request-ID": upper})

        assert response.headers["X-Request-ID"] == upper.lower()

    def test_invalid_request_id_replaced(self, request_id_client: TestClient):
        response = request_id_client.get("/health", headers={"X-Request-ID": "bad id!"})

        assert response.headers["X-Request-ID"] != "bad id!"
        UUID(response.headers["X-Request-ID"])

    def test_request_id_in_error_body(self, request_id_client: TestClient):
        response = request_id_client.get(
            f"/files/{uuid4()}", headers={"X-Request-ID": "trace-404"}
        )

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-404"
        assert response.json()["error"]["request_id"] == "trace-404"


class TestRequestIdValidation:
    def test_overlong_id_is_invalid(self):
        assert is_valid_request_id("a" * 129) is False

    def test_normalize_keeps_non_uuid(self):
        assert normalize_request_id("Trace-1") == "Trace-1"
