"""Tests for login, token refresh and logout"""

from httpx import AsyncClient

TEST_PASSWORD = "testpass123"


async def _login(client, email, password=TEST_PASSWORD):
    return await client.post("/auth/login", data={"username": email, "password": password})


async def test_login_is_case_insensitive(client: AsyncClient, owner_user):
    response = await _login(client, "Owner@TestRestaurant.com")

    assert response.status_code == 200
    tokens = response.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["expires_in"] > 0

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "owner@testrestaurant.com"
    assert me.json()["role"] == "OWNER"


async def test_wrong_password(client: AsyncClient, owner_user):
    response = await _login(client, "owner@testrestaurant.com", "not-the-password")

    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password"}


async def test_refresh_rotates_token(client: AsyncClient, owner_user):
    tokens = (await _login(client, "owner@testrestaurant.com")).json()

    first = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert first.status_code == 200
    assert first.json()["refresh_token"] != tokens["refresh_token"]

    replay = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401


async def test_access_token_cannot_refresh(client: AsyncClient, owner_user):
    tokens = (await _login(client, "owner@testrestaurant.com")).json()

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})

    assert response.status_code == 401


async def test_logout_revokes_refresh_token(client: AsyncClient, owner_user):
    tokens = (await _login(client, "owner@testrestaurant.com")).json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = await client.post("/auth/logout", headers=headers)
    assert response.json() == {"success": True}

    refreshed = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 401


async def test_garbage_token(client: AsyncClient):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
