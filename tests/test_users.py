"""
User endpoint tests — registration, login, the authenticated /me
endpoints and profile lookups, exercised through the ASGI app against
the in-memory database.
"""
import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _register(client: AsyncClient, email: str, password: str = "pass1234", role: str = "Client"):
    resp = await client.post("/api/v1/users", json={"email": email, "password": password, "role": role})
    assert resp.status_code == 201
    return resp.json()


async def _login(client: AsyncClient, email: str, password: str = "pass1234") -> str:
    resp = await client.post("/api/v1/users/login", json={"email": email, "password": password})
    body = resp.json()
    assert body["ok"] is True, body
    return body["token"]


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Create account
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_account(async_client: AsyncClient):
    body = await _register(async_client, "new@example.com", role="Host")
    assert body == {"ok": True, "error": None}


@pytest.mark.asyncio
async def test_create_account_duplicate_email(async_client: AsyncClient):
    await _register(async_client, "dup@example.com")

    resp = await async_client.post("/api/v1/users", json={
        "email": "dup@example.com", "password": "other", "role": "Host",
    })
    assert resp.json() == {"ok": False, "error": "There is a user with that email already"}


@pytest.mark.asyncio
async def test_create_account_invalid_role(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/users", json={
        "email": "bad@example.com", "password": "pw", "role": "Superuser",
    })
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_login_returns_token(async_client: AsyncClient):
    await _register(async_client, "login@example.com")

    token = await _login(async_client, "login@example.com")
    assert isinstance(token, str) and token.count(".") == 2


@pytest.mark.asyncio
async def test_login_unknown_user(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/users/login", json={"email": "ghost@example.com", "password": "x"})
    assert resp.json() == {"ok": False, "error": "User not found", "token": None}


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient):
    await _register(async_client, "wrong@example.com")

    resp = await async_client.post("/api/v1/users/login", json={"email": "wrong@example.com", "password": "nope"})
    assert resp.json() == {"ok": False, "error": "Wrong password", "token": None}


# ---------------------------------------------------------------------------
# /me and profile lookups
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_me_requires_token(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users/me")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users/me", headers=_auth("not-a-jwt"))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_current_user(async_client: AsyncClient):
    await _register(async_client, "me@example.com", role="Host")
    token = await _login(async_client, "me@example.com")

    resp = await async_client.get("/api/v1/users/me", headers=_auth(token))
    assert resp.status_code == 200
    user = resp.json()
    assert user["email"] == "me@example.com"
    assert user["role"] == "Host"
    assert "password" not in user


@pytest.mark.asyncio
async def test_user_profile(async_client: AsyncClient):
    await _register(async_client, "profile@example.com")
    token = await _login(async_client, "profile@example.com")
    user_id = (await async_client.get("/api/v1/users/me", headers=_auth(token))).json()["id"]

    resp = await async_client.get(f"/api/v1/users/{user_id}")
    body = resp.json()
    assert body["ok"] is True
    assert body["user"]["email"] == "profile@example.com"


@pytest.mark.asyncio
async def test_user_profile_not_found(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/users/99999")
    assert resp.json() == {"ok": False, "error": "User not found", "user": None}


# ---------------------------------------------------------------------------
# Edit profile
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_edit_profile_email(async_client: AsyncClient):
    await _register(async_client, "before@example.com")
    token = await _login(async_client, "before@example.com")

    resp = await async_client.patch("/api/v1/users/me", json={"email": "after@example.com"}, headers=_auth(token))
    assert resp.json() == {"ok": True, "error": None}

    me = await async_client.get("/api/v1/users/me", headers=_auth(token))
    assert me.json()["email"] == "after@example.com"
    # Password survives an email-only edit.
    await _login(async_client, "after@example.com")


@pytest.mark.asyncio
async def test_edit_profile_email_in_use(async_client: AsyncClient):
    await _register(async_client, "first@example.com")
    await _register(async_client, "second@example.com")
    token = await _login(async_client, "first@example.com")

    resp = await async_client.patch("/api/v1/users/me", json={"email": "second@example.com"}, headers=_auth(token))
    assert resp.json() == {"ok": False, "error": "Email already in use"}


@pytest.mark.asyncio
async def test_edit_profile_password(async_client: AsyncClient):
    await _register(async_client, "pw@example.com", password="old-password")
    token = await _login(async_client, "pw@example.com", password="old-password")

    resp = await async_client.patch("/api/v1/users/me", json={"password": "new-password"}, headers=_auth(token))
    assert resp.json()["ok"] is True

    await _login(async_client, "pw@example.com", password="new-password")
    old = await async_client.post("/api/v1/users/login", json={"email": "pw@example.com", "password": "old-password"})
    assert old.json()["error"] == "Wrong password"


@pytest.mark.asyncio
async def test_responses_carry_timing_headers(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/users/login", json={"email": "none@example.com", "password": "x"})
    assert "x-response-time-ms" in resp.headers
    assert int(resp.headers["x-query-count"]) >= 1
