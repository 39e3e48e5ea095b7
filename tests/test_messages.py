"""Messaging over the API: inbox summaries, threads and read state."""
import pytest


async def _send(client, headers, receiver_id, content):
    r = await client.post("/api/messages", json={"receiverId": receiver_id, "content": content}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["message"]


@pytest.mark.asyncio
async def test_empty_inbox(client, player):
    _, headers = player
    r = await client.get("/api/messages", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"conversations": []}


@pytest.mark.asyncio
async def test_conversation_scenario(client, player, scout):
    a, a_headers = player
    b, b_headers = scout
    await _send(client, a_headers, b["id"], "Hi")
    await _send(client, b_headers, a["id"], "Hello back")
    await _send(client, b_headers, a["id"], "Interested in trial?")

    r = await client.get("/api/messages", headers=a_headers)
    [convo] = r.json()["conversations"]
    assert convo["partner"]["id"] == b["id"]
    assert convo["lastMessage"]["content"] == "Interested in trial?"
    assert convo["unreadCount"] == 2

    # B sees the same conversation from the other side
    r = await client.get("/api/messages", headers=b_headers)
    [b_convo] = r.json()["conversations"]
    assert b_convo["partner"]["id"] == a["id"]
    assert b_convo["unreadCount"] == 1

    r = await client.get(f"/api/messages/{b['id']}", headers=a_headers)
    assert r.status_code == 200
    thread = r.json()["messages"]
    assert [m["content"] for m in thread] == ["Hi", "Hello back", "Interested in trial?"]
    assert all(m["isRead"] for m in thread if m["receiverId"] == a["id"])

    for _ in range(2):
        r = await client.get("/api/messages", headers=a_headers)
        assert r.json()["conversations"][0]["unreadCount"] == 0

    # Opening again changes nothing
    again = (await client.get(f"/api/messages/{b['id']}", headers=a_headers)).json()["messages"]
    assert [m["isRead"] for m in again] == [m["isRead"] for m in thread]

    # A's own message to B stays unread until B opens the thread
    r = await client.get("/api/messages", headers=b_headers)
    assert r.json()["conversations"][0]["unreadCount"] == 1


@pytest.mark.asyncio
async def test_one_summary_per_partner_newest_first(client, player, scout, academy):
    a, a_headers = player
    s, s_headers = scout
    c, c_headers = academy
    await _send(client, s_headers, a["id"], "From scout")
    await _send(client, c_headers, a["id"], "From academy")
    await _send(client, a_headers, s["id"], "Reply to scout")

    r = await client.get("/api/messages", headers=a_headers)
    convos = r.json()["conversations"]
    assert [cv["partner"]["id"] for cv in convos] == [s["id"], c["id"]]
    assert convos[0]["lastMessage"]["content"] == "Reply to scout"
    assert convos[0]["unreadCount"] == 1
    assert convos[1]["unreadCount"] == 1


@pytest.mark.asyncio
async def test_send_validation(client, player, scout):
    a, a_headers = player
    _, s_headers = scout

    r = await client.post("/api/messages", json={"receiverId": 999, "content": "Hello?"}, headers=a_headers)
    assert r.status_code == 404
    assert r.json() == {"message": "Receiver not found"}

    r = await client.post("/api/messages", json={"receiverId": a["id"], "content": "Note to self"}, headers=a_headers)
    assert r.status_code == 400

    r = await client.post("/api/messages", json={"receiverId": a["id"], "content": "   "}, headers=s_headers)
    assert r.status_code == 400

    r = await client.post("/api/messages", json={"receiverId": a["id"], "content": "Hi"})
    assert r.status_code == 401
