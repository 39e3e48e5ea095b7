"""Profile creation, updates and discovery."""
import pytest


@pytest.mark.asyncio
async def test_create_and_read_player_profile(client, player):
    user, headers = player
    r = await client.post(
        "/api/profiles/player",
        json={
            "position": "Striker",
            "age": 19,
            "location": "Lisbon",
            "overallRating": 82,
            "stats": {"pace": 88, "shooting": 84},
        },
        headers=headers,
    )
    assert r.status_code == 201
    profile = r.json()["profile"]
    assert profile["role"] == "player"
    assert profile["userId"] == user["id"]
    assert profile["overallRating"] == 82
    assert profile["isVerified"] is False

    r = await client.get(f"/api/profiles/player/{user['id']}")
    assert r.status_code == 200
    data = r.json()
    assert data["profile"]["stats"] == {"pace": 88, "shooting": 84}
    assert data["user"]["firstName"] == "Marcus"

    r = await client.get("/api/profiles/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["profile"]["position"] == "Striker"


@pytest.mark.asyncio
async def test_profile_is_unique_per_user(client, scout):
    _, headers = scout
    r = await client.post("/api/profiles/scout", json={"organization": "A"}, headers=headers)
    assert r.status_code == 201
    r = await client.post("/api/profiles/scout", json={"organization": "B"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Profile already exists"


@pytest.mark.asyncio
async def test_profile_role_must_match(client, player):
    _, headers = player
    r = await client.post("/api/profiles/academy", json={"name": "Not mine"}, headers=headers)
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_profile_validation(client, player, academy):
    _, p_headers = player
    r = await client.post("/api/profiles/player", json={"stats": {"pace": 150}}, headers=p_headers)
    assert r.status_code == 400
    assert r.json()["errors"][0]["path"] == "stats.pace"

    _, a_headers = academy
    r = await client.post("/api/profiles/academy", json={"foundedYear": 1500, "name": "Old"}, headers=a_headers)
    assert r.status_code == 400
    r = await client.post("/api/profiles/academy", json={"location": "Nowhere"}, headers=a_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_partial_update(client, academy):
    user, headers = academy
    r = await client.put("/api/profiles/academy", json={"website": "https://x.org"}, headers=headers)
    assert r.status_code == 404

    await client.post(
        "/api/profiles/academy",
        json={"name": "Northbridge", "location": "Manchester", "foundedYear": 1998},
        headers=headers,
    )
    r = await client.put("/api/profiles/academy", json={"website": "https://northbridge.org"}, headers=headers)
    assert r.status_code == 200
    profile = r.json()["profile"]
    assert profile["website"] == "https://northbridge.org"
    assert profile["name"] == "Northbridge"
    assert profile["foundedYear"] == 1998


@pytest.mark.asyncio
async def test_missing_profile_404(client, player):
    user, headers = player
    r = await client.get("/api/profiles/me", headers=headers)
    assert r.status_code == 404
    r = await client.get(f"/api/profiles/scout/{user['id']}")
    assert r.status_code == 404
    assert r.json() == {"message": "Profile not found"}


@pytest.mark.asyncio
async def test_discover_players_with_filters(client, register):
    for first, position, location, rating in (
        ("Ana", "Striker", "Lisbon", 70),
        ("Ben", "Goalkeeper", "Porto", 85),
        ("Cai", "Second Striker", "Porto", 60),
    ):
        _, headers = await register("player", first_name=first)
        await client.post(
            "/api/profiles/player",
            json={"position": position, "location": location, "overallRating": rating},
            headers=headers,
        )

    r = await client.get("/api/profiles/player")
    assert r.status_code == 200
    names = [p["user"]["firstName"] for p in r.json()["players"]]
    assert names == ["Ben", "Ana", "Cai"]

    r = await client.get("/api/profiles/player", params={"position": "striker"})
    assert {p["user"]["firstName"] for p in r.json()["players"]} == {"Ana", "Cai"}

    r = await client.get("/api/profiles/player", params={"position": "striker", "location": "porto"})
    assert [p["user"]["firstName"] for p in r.json()["players"]] == ["Cai"]
