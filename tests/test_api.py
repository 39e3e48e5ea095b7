"""Tests for basic API functionality: health, auth and error envelopes."""
import pytest

PASSWORD = "secret123"


@pytest.mark.asyncio
async def test_health(client):
    """Health endpoint returns ok."""
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_register_returns_session(client):
    r = await client.post(
        "/api/auth/register",
        json={
            "email": "New.Player@ScoutNet.io",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "firstName": "New",
            "lastName": "Player",
        },
    )
    assert r.status_code == 201
    data = r.json()
    assert data["user"]["email"] == "new.player@scoutnet.io"
    assert data["user"]["role"] == "player"
    assert data["tokenType"] == "bearer"
    assert "passwordHash" not in data["user"]
    assert "talent_session" in r.cookies

    # Cookie alone authenticates
    r = await client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json()["user"]["firstName"] == "New"


@pytest.mark.asyncio
async def test_register_duplicate_email(client, register):
    await register("player", email="dup@scoutnet.io")
    r = await client.post(
        "/api/auth/register",
        json={
            "email": "DUP@scoutnet.io",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "firstName": "Other",
            "lastName": "Person",
        },
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_validation_errors(client):
    r = await client.post(
        "/api/auth/register",
        json={
            "email": "not-an-email",
            "password": "abc",
            "confirmPassword": "abc",
            "firstName": "A",
            "lastName": "B",
        },
    )
    assert r.status_code == 400
    data = r.json()
    assert data["message"] == "Validation failed"
    paths = {e["path"] for e in data["errors"]}
    assert "email" in paths
    assert "password" in paths


@pytest.mark.asyncio
async def test_register_password_mismatch(client):
    r = await client.post(
        "/api/auth/register",
        json={
            "email": "mismatch@scoutnet.io",
            "password": PASSWORD,
            "confirmPassword": PASSWORD + "x",
            "firstName": "A",
            "lastName": "B",
        },
    )
    assert r.status_code == 400
    assert any("Passwords do not match" in e["message"] for e in r.json()["errors"])


@pytest.mark.asyncio
async def test_login_success_and_failure(client, register):
    await register("scout", email="login@scoutnet.io")

    r = await client.post("/api/auth/login", json={"email": "login@scoutnet.io", "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "scout"
    client.cookies.clear()

    wrong = await client.post("/api/auth/login", json={"email": "login@scoutnet.io", "password": "wrongpass"})
    unknown = await client.post("/api/auth/login", json={"email": "nobody@scoutnet.io", "password": "wrongpass"})
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_short_wrong_password_is_unauthorized(client, register):
    await register(email="short@scoutnet.io")
    r = await client.post("/api/auth/login", json={"email": "short@scoutnet.io", "password": "bad"})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_password_whitespace_is_significant(client):
    padded = f"  {PASSWORD}  "
    r = await client.post(
        "/api/auth/register",
        json={
            "email": "padded@scoutnet.io",
            "password": padded,
            "confirmPassword": padded,
            "firstName": "Pad",
            "lastName": "Ded",
        },
    )
    assert r.status_code == 201
    client.cookies.clear()

    r = await client.post("/api/auth/login", json={"email": "padded@scoutnet.io", "password": PASSWORD})
    assert r.status_code == 401
    r = await client.post("/api/auth/login", json={"email": "padded@scoutnet.io", "password": padded})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_me_requires_session(client):
    r = await client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}

    r = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_x_auth_token_header(client, player):
    user, headers = player
    token = headers["Authorization"].split(" ", 1)[1]
    r = await client.get("/api/auth/me", headers={"X-Auth-Token": token})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == user["id"]


@pytest.mark.asyncio
async def test_logout_clears_cookie(client):
    await client.post(
        "/api/auth/register",
        json={
            "email": "bye@scoutnet.io",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "firstName": "Bye",
            "lastName": "Bye",
        },
    )
    r = await client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json() == {"message": "Logged out successfully"}
    assert "Max-Age=0" in r.headers["set-cookie"]
    r = await client.get("/api/auth/me")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_role_change_before_profile_only(client, player):
    user, headers = player
    r = await client.put("/api/auth/update-role", json={"role": "coach"}, headers=headers)
    assert r.status_code == 400

    r = await client.put("/api/auth/update-role", json={"role": "scout"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "scout"

    # Role is re-read on every request
    r = await client.get("/api/auth/me", headers=headers)
    assert r.json()["user"]["role"] == "scout"

    r = await client.post("/api/profiles/scout", json={"organization": "Atlantic"}, headers=headers)
    assert r.status_code == 201
    r = await client.put("/api/auth/update-role", json={"role": "player"}, headers=headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_role_route_alias(client, player):
    _, headers = player
    r = await client.put("/api/auth/role", json={"role": "academy"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "academy"


@pytest.mark.asyncio
async def test_public_user_hides_email(client, player):
    user, _ = player
    r = await client.get(f"/api/users/{user['id']}")
    assert r.status_code == 200
    assert r.json()["user"]["firstName"] == "Marcus"
    assert "email" not in r.json()["user"]

    r = await client.get("/api/users/9999")
    assert r.status_code == 404
    assert r.json() == {"message": "User not found"}


@pytest.mark.asyncio
async def test_role_guard_forbidden(client, player):
    _, headers = player
    r = await client.post(
        "/api/trials",
        json={"title": "T", "organization": "O", "location": "L", "date": "2030-01-01T10:00:00"},
        headers=headers,
    )
    assert r.status_code == 403
    assert r.json() == {"message": "Forbidden"}
