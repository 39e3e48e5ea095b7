"""Dashboard analytics per role."""
import pytest


@pytest.mark.asyncio
async def test_player_dashboard(client, player, scout, academy):
    p, p_headers = player
    s, s_headers = scout
    _, a_headers = academy

    r = await client.post(
        "/api/videos",
        data={"title": "Clip"},
        files={"videoFile": ("clip.mp4", b"\x00", "video/mp4")},
        headers=p_headers,
    )
    video_id = r.json()["video"]["id"]
    await client.get(f"/api/videos/{video_id}")
    await client.get(f"/api/videos/{video_id}")
    await client.post(f"/api/videos/{video_id}/like", headers=s_headers)

    await client.post("/api/interests", json={"playerId": p["id"], "type": "viewed_profile"}, headers=s_headers)
    await client.post("/api/interests", json={"playerId": p["id"], "type": "viewed_profile"}, headers=s_headers)

    r = await client.post(
        "/api/trials",
        json={"title": "T", "organization": "O", "location": "L", "date": "2030-01-01T10:00:00"},
        headers=a_headers,
    )
    await client.post("/api/applications", json={"trialId": r.json()["trial"]["id"]}, headers=p_headers)
    await client.post("/api/messages", json={"receiverId": p["id"], "content": "Hi"}, headers=s_headers)

    r = await client.get("/api/analytics/me", headers=p_headers)
    assert r.status_code == 200
    stats = r.json()["analytics"]
    assert stats["role"] == "player"
    assert stats["videos"] == 1
    assert stats["totalViews"] == 2
    assert stats["totalLikes"] == 1
    assert stats["interests"]["viewed_profile"] == 2
    assert stats["interests"]["watched_video"] == 0
    assert stats["distinctScouts"] == 1
    assert stats["applications"] == {"pending": 1, "accepted": 0, "rejected": 0}
    assert stats["unreadMessages"] == 1


@pytest.mark.asyncio
async def test_academy_and_scout_dashboards(client, player, scout, academy):
    p, p_headers = player
    _, s_headers = scout
    _, a_headers = academy

    r = await client.post(
        "/api/trials",
        json={"title": "T", "organization": "O", "location": "L", "date": "2030-01-01T10:00:00"},
        headers=a_headers,
    )
    trial_id = r.json()["trial"]["id"]
    app_id = (await client.post("/api/applications", json={"trialId": trial_id}, headers=p_headers)).json()[
        "application"
    ]["id"]
    await client.put(f"/api/applications/{app_id}/status", json={"status": "accepted"}, headers=a_headers)
    await client.post("/api/interests", json={"playerId": p["id"], "type": "added_to_watchlist"}, headers=s_headers)

    stats = (await client.get("/api/analytics/me", headers=a_headers)).json()["analytics"]
    assert stats["role"] == "academy"
    assert stats["trials"] == 1
    assert stats["applications"]["accepted"] == 1
    assert stats["distinctApplicants"] == 1

    stats = (await client.get("/api/analytics/me", headers=s_headers)).json()["analytics"]
    assert stats["role"] == "scout"
    assert stats["interests"]["added_to_watchlist"] == 1
    assert stats["distinctPlayers"] == 1
    assert stats["unreadMessages"] == 0


@pytest.mark.asyncio
async def test_analytics_requires_session(client):
    r = await client.get("/api/analytics/me")
    assert r.status_code == 401
