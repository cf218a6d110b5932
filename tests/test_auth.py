"""
Tests for registration, login and token handling.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from jose import jwt

from postguard.core.auth.audit import AuditOutcome
from postguard.core.container import Container
from tests.conftest import ADMIN_ID, TEST_SECRET, VIEWER_ID, forged_headers


@pytest.mark.asyncio
async def test_register_defaults_to_viewer(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "newcomer", "password": "secret123"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "VIEWER"
    assert data["username"] == "newcomer"
    assert data["permissions"] == ["posts:read"]
    assert data["token"]


@pytest.mark.asyncio
async def test_register_with_role(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "writer", "password": "secret123", "role": "EDITOR"},
    )

    assert response.status_code == 201
    assert response.json()["role"] == "EDITOR"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["SUPERUSER", "editor", ""])
async def test_register_rejects_unknown_role(client: AsyncClient, seeded: Container, role):
    response = await client.post(
        "/api/auth/register",
        json={"username": "sneaky", "password": "secret123", "role": role},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_role"
    assert await seeded.users.get_by_username("sneaky") is None


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "admin", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists."


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "shorty", "password": "abc"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login(client: AsyncClient):
    response = await client.post(
        "/api/auth/login",
        json={"username": "editor1", "password": "editor123"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "EDITOR"
    assert data["userId"] == 2
    assert data["tokenType"] == "bearer"
    assert "self_posts:update" in data["permissions"]
    assert data["message"] == "Welcome, editor1 (EDITOR)!"


@pytest.mark.asyncio
async def test_login_token_is_accepted(client: AsyncClient):
    login = await client.post(
        "/api/auth/login",
        json={"username": "viewer", "password": "viewer123"},
    )
    token = login.json()["token"]

    response = await client.get("/api/posts", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,password",
    [("editor1", "wrong-password"), ("nobody", "whatever")],
)
async def test_login_invalid_credentials(client: AsyncClient, username, password):
    response = await client.post(
        "/api/auth/login",
        json={"username": username, "password": password},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password."


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    response = await client.get("/api/posts")

    assert response.status_code == 401
    assert response.json()["detail"] == "Access Denied. No token provided."
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient):
    response = await client.get(
        "/api/posts",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token."


@pytest.mark.asyncio
async def test_unrecognised_role_claim_is_configuration_fault(client: AsyncClient, seeded: Container):
    response = await client.get("/api/posts", headers=forged_headers(ADMIN_ID, "SUPERUSER"))

    assert response.status_code == 403
    data = response.json()
    assert data["error"] == "invalid_role_configuration"
    assert data["detail"] == "Forbidden. Invalid Role Configuration."

    [event] = seeded.audit_log.events
    assert event.outcome == AuditOutcome.CONFIGURATION_FAULT
    assert event.actor_role == "SUPERUSER"
    assert event.required_permission == "posts:read"


@pytest.mark.asyncio
async def test_correlation_id_reaches_audit_and_response(client: AsyncClient, seeded: Container, viewer_headers):
    response = await client.delete(
        "/api/posts/1",
        headers={**viewer_headers, "X-Correlation-ID": "trace-42"},
    )

    assert response.status_code == 403
    assert response.headers["x-correlation-id"] == "trace-42"
    [event] = seeded.audit_log.events
    assert event.correlation_id == "trace-42"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient):
    token = jwt.encode(
        {"sub": "1", "role": "ADMIN", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        TEST_SECRET,
        algorithm="HS256",
    )

    response = await client.get("/api/posts", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_access_log_carries_request_context(client: AsyncClient, viewer_headers, caplog):
    caplog.set_level(logging.INFO, logger="postguard.api.middleware.logging")

    await client.get("/api/posts", headers={**viewer_headers, "X-Correlation-ID": "trace-7"})

    [record] = [r for r in caplog.records if r.name == "postguard.api.middleware.logging"]
    assert record.correlation_id == "trace-7"
    assert record.path == "/api/posts"
    assert record.user_id == str(VIEWER_ID)
    assert record.role == "VIEWER"
    assert record.status_code == 200
