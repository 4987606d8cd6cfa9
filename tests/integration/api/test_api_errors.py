from datetime import timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.utils.auth import auth_headers, make_session_token


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_missing_session_token_is_unauthorized(client: AsyncClient):
    response = await client.post("/invite/accept", json={"token": "anything"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "code": "UNAUTHENTICATED"}


@pytest.mark.asyncio
async def test_expired_session_token_is_unauthorized(client: AsyncClient):
    token = make_session_token(uuid4(), "a@example.com", expires_in=timedelta(minutes=-5))

    response = await client.post(
        "/invite/list", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_unauthorized(client: AsyncClient):
    from jose import jwt

    forged = jwt.encode(
        {"sub": str(uuid4()), "email": "a@example.com", "aud": "authenticated"},
        "not-the-secret",
        algorithm="HS256",
    )

    response = await client.post("/invite/list", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_wrong_method_is_405(client: AsyncClient):
    response = await client.get("/invite/create")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


@pytest.mark.asyncio
async def test_invalid_body_is_400(client: AsyncClient):
    response = await client.post(
        "/invite/create",
        json={"workspaceId": str(uuid4()), "email": "not-an-email"},
        headers=auth_headers(uuid4(), "owner@example.com"),
    )

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "INVALID_ARGUMENT"
    assert "email" in data["error"]


@pytest.mark.asyncio
async def test_missing_token_field_is_400(client: AsyncClient):
    response = await client.post(
        "/invite/decline", json={}, headers=auth_headers(uuid4(), "a@example.com")
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ARGUMENT"


@pytest.mark.asyncio
async def test_unknown_invite_token_is_404(client: AsyncClient):
    response = await client.post(
        "/invite/accept",
        json={"token": "does-not-exist"},
        headers=auth_headers(uuid4(), "a@example.com"),
    )

    assert response.status_code == 404
    assert response.json()["code"] == "INVITE_NOT_FOUND"
