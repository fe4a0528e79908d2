"""Error envelope, validation mapping, security headers and health."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from contracthub.core.config import settings
from contracthub.core.errors import Conflict, register_exception_handlers
from contracthub.core.middleware import SECURITY_HEADERS
from contracthub.rbac.permissions import Role
from tests.helpers import auth_headers, make_user


def test_unknown_route(client):
    res = client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Route not found", "code": "NOT_FOUND"}


def test_request_validation_is_400_with_field_details(client):
    res = client.post("/api/auth/register", json={"name": "", "email": "not-an-email"})

    assert res.status_code == 400
    body = res.json()
    assert body["code"] == "VALIDATION_FAILED"
    assert body["error"] == "Validation failed"
    fields = {d["field"] for d in body["details"]}
    assert {"name", "email", "password"} <= fields


def test_security_headers_on_every_response(client):
    for res in (client.get("/api/auth/status"), client.get("/api/nowhere")):
        for name, value in SECURITY_HEADERS.items():
            assert res.headers[name] == value


def test_success_envelope(client):
    res = client.get("/api/auth/status")
    assert res.json() == {
        "success": True,
        "data": {"isAuthenticated": False, "user": None},
        "message": None,
    }


def test_resource_not_found(client, store):
    viewer = make_user(store, Role.VIEWER)
    res = client.get("/api/products/123", headers=auth_headers(viewer))
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"


@pytest.fixture
def broken_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    @app.get("/conflict")
    async def conflict():
        raise Conflict("Already there", details={"id": 1})

    return app


def test_unexpected_errors_are_hidden_outside_development(broken_app, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    client = TestClient(broken_app, raise_server_exceptions=False)

    res = client.get("/boom")

    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Internal server error", "code": "INTERNAL_ERROR"}


def test_unexpected_errors_are_detailed_in_development(broken_app, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    client = TestClient(broken_app, raise_server_exceptions=False)

    res = client.get("/boom")

    assert res.status_code == 500
    assert res.json()["error"] == "database password is hunter2"


def test_app_error_details_are_passed_through(broken_app):
    res = TestClient(broken_app).get("/conflict")
    assert res.status_code == 409
    assert res.json() == {"success": False, "error": "Already there", "code": "CONFLICT", "details": {"id": 1}}


def test_health(client, monkeypatch):
    async def fake_check():
        return True

    monkeypatch.setattr("contracthub.main.check_database_connection", fake_check)

    res = client.get("/health")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data == {"status": "ok", "database": "connected", "version": settings.APP_VERSION}


def test_health_degraded(client, monkeypatch):
    async def fake_check():
        return False

    monkeypatch.setattr("contracthub.main.check_database_connection", fake_check)

    data = client.get("/health").json()["data"]

    assert data["status"] == "degraded"
    assert data["database"] == "unavailable"
