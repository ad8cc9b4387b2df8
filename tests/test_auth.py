"""Tests for registration, login, token refresh and profile routes."""

from app.auth.crypto import create_refresh_token, decode_token, REFRESH_TOKEN_TYPE
from conftest import register


async def test_register_returns_tokens(client):
    response = await client.post(
        "/api/auth/register",
        json={"email": "Carol@Example.com", "password": "secret123", "name": "Carol"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "carol@example.com"
    assert body["data"]["user"]["preferences"] == {"theme": "system", "emailNotifications": True}
    assert "passwordHash" not in body["data"]["user"]
    assert body["data"]["token"]
    assert body["data"]["refreshToken"]


async def test_register_duplicate_email(client):
    await register(client)
    response = await client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": "another1", "name": "Alice 2"},
    )

    assert response.status_code == 409
    assert response.json()["success"] is False


async def test_register_short_password(client):
    response = await client.post(
        "/api/auth/register",
        json={"email": "dave@example.com", "password": "123", "name": "Dave"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_login(client):
    await register(client)
    response = await client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["name"] == "Alice"
    assert data["user"]["lastLoginAt"] is not None


async def test_login_wrong_password(client):
    await register(client)
    response = await client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid email or password"}


async def test_me_requires_token(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401


async def test_me_rejects_garbage_token(client):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_me(client, auth_headers):
    response = await client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alice@example.com"


async def test_refresh_issues_new_pair(client):
    data = await register(client)
    response = await client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})

    assert response.status_code == 200
    pair = response.json()["data"]
    assert pair["token"] != data["token"]
    assert decode_token(pair["refreshToken"], token_type=REFRESH_TOKEN_TYPE)["sub"] == data["user"]["id"]


async def test_refresh_requires_token(client):
    response = await client.post("/api/auth/refresh", json={})
    assert response.status_code == 400


async def test_refresh_rejects_access_token(client):
    data = await register(client)
    response = await client.post("/api/auth/refresh", json={"refreshToken": data["token"]})
    assert response.status_code == 401


async def test_refresh_token_is_not_an_access_token(client):
    data = await register(client)
    headers = {"Authorization": f"Bearer {create_refresh_token(data['user']['id'])}"}

    response = await client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401


async def test_update_profile_merges_preferences(client, auth_headers):
    response = await client.put(
        "/api/auth/profile",
        json={"name": "Alice Cooper", "preferences": {"theme": "dark"}},
        headers=auth_headers,
    )

    assert response.status_code == 200
    user = response.json()["data"]
    assert user["name"] == "Alice Cooper"
    assert user["preferences"] == {"theme": "dark", "emailNotifications": True}


async def test_logout(client, auth_headers):
    response = await client.post("/api/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"


async def test_google_login_unconfigured(client):
    response = await client.get("/api/auth/google", follow_redirects=False)

    assert response.status_code == 500
    assert response.json()["error"] == "Google sign-in is not configured"


async def test_google_callback_with_bad_state_redirects_to_error(client):
    response = await client.get(
        "/api/auth/google/callback",
        params={"code": "abc", "state": "forged"},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"].endswith("/auth/error")
