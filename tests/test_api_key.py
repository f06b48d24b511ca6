"""
Tests for the API key request gate.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from app.core.api_key import ApiKeyMiddleware, allow_all, build_gate, require_api_key
from app.core.config import Settings


def gated_app(gate, log_only=False):
    app = FastAPI()
    app.add_middleware(ApiKeyMiddleware, gate=gate, log_only=log_only)

    @app.get("/v1/ping")
    def ping():
        return {"pong": True}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


class TestGates:

    def test_allow_all(self):
        assert allow_all(Headers({})) is None

    def test_missing_key(self):
        gate = require_api_key("secret")
        assert gate(Headers({})) == "Missing API Key"

    def test_wrong_key(self):
        gate = require_api_key("secret")
        assert gate(Headers({"X-API-Key": "guess"})) == "Incorrect API Key"

    def test_right_key_with_custom_header(self):
        gate = require_api_key("secret", header_name="stenexpo")
        assert gate(Headers({"stenexpo": "secret"})) is None

    def test_gate_is_permissive_without_configured_key(self):
        assert build_gate(Settings(DATABASE_URL="x.db", _env_file=None)) is allow_all

    def test_gate_requires_configured_key(self):
        gate = build_gate(Settings(DATABASE_URL="x.db", API_KEY="secret", _env_file=None))
        assert gate(Headers({"X-API-Key": "secret"})) is None
        assert gate(Headers({})) is not None


class TestMiddleware:

    @pytest.fixture
    def client(self):
        return TestClient(gated_app(require_api_key("secret")))

    def test_rejects_missing_key(self, client):
        response = client.get("/v1/ping")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "message": "Missing API Key"}

    def test_passes_with_key(self, client):
        response = client.get("/v1/ping", headers={"X-API-Key": "secret"})

        assert response.status_code == 200
        assert response.json() == {"pong": True}

    def test_health_is_not_gated(self, client):
        assert client.get("/health").status_code == 200

    def test_log_only_mode_passes_through(self):
        client = TestClient(gated_app(require_api_key("secret"), log_only=True))
        assert client.get("/v1/ping").status_code == 200


def test_default_app_is_open(client):
    assert client.get("/v1/users").status_code == 200
