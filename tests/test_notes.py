"""Tests for video notes."""

from conftest import save_video


async def test_create_and_list_notes(client, auth_headers):
    first = await save_video(client, auth_headers, "vid1")
    second = await save_video(client, auth_headers, "vid2")

    response = await client.post(
        "/api/notes", json={"videoId": first["id"], "content": "  nice drop  ", "timestamp": 95}, headers=auth_headers
    )
    assert response.status_code == 201
    note = response.json()["data"]
    assert note["content"] == "nice drop"
    assert note["timestamp"] == 95

    await client.post("/api/notes", json={"videoId": second["id"], "content": "solo at the end"}, headers=auth_headers)

    everything = (await client.get("/api/notes", headers=auth_headers)).json()
    assert [item["content"] for item in everything["data"]] == ["solo at the end", "nice drop"]

    filtered = (await client.get("/api/notes", params={"videoId": first["id"]}, headers=auth_headers)).json()
    assert [item["id"] for item in filtered["data"]] == [note["id"]]

    searched = (await client.get("/api/notes", params={"search": "SOLO"}, headers=auth_headers)).json()
    assert searched["pagination"]["total"] == 1


async def test_note_validation(client, auth_headers, other_headers):
    video = await save_video(client, auth_headers, "vid1")
    theirs = await save_video(client, other_headers, "vid2")

    blank = await client.post("/api/notes", json={"videoId": video["id"], "content": "   "}, headers=auth_headers)
    assert blank.status_code == 400

    negative = await client.post(
        "/api/notes", json={"videoId": video["id"], "content": "x", "timestamp": -1}, headers=auth_headers
    )
    assert negative.status_code == 400

    foreign = await client.post("/api/notes", json={"videoId": theirs["id"], "content": "x"}, headers=auth_headers)
    assert foreign.status_code == 404


async def test_update_and_delete_note(client, auth_headers, other_headers):
    video = await save_video(client, auth_headers, "vid1")
    note = (await client.post("/api/notes", json={"videoId": video["id"], "content": "draft"}, headers=auth_headers)).json()["data"]

    assert (await client.put(f"/api/notes/{note['id']}", json={"content": "hijack"}, headers=other_headers)).status_code == 404

    response = await client.put(f"/api/notes/{note['id']}", json={"content": "final", "timestamp": 12}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["content"] == "final"
    assert response.json()["data"]["timestamp"] == 12

    fetched = (await client.get(f"/api/notes/{note['id']}", headers=auth_headers)).json()["data"]
    assert fetched["content"] == "final"

    assert (await client.delete(f"/api/notes/{note['id']}", headers=auth_headers)).status_code == 200
    assert (await client.get(f"/api/notes/{note['id']}", headers=auth_headers)).status_code == 404


async def test_search_wildcards_match_literally(client, auth_headers):
    video = await save_video(client, auth_headers, "vid1")
    await client.post("/api/notes", json={"videoId": video["id"], "content": "plain text"}, headers=auth_headers)

    body = (await client.get("/api/notes", params={"search": "%"}, headers=auth_headers)).json()
    assert body["pagination"]["total"] == 0
