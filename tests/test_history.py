"""Tests for watch history and viewing statistics."""

from conftest import save_video


async def record(client, headers, video_id, duration, position=0):
    return await client.post(
        "/api/history",
        json={"videoId": video_id, "duration": duration, "position": position},
        headers=headers,
    )


async def test_record_watch_updates_overlay(client, auth_headers):
    video = await save_video(client, auth_headers, "vid1")

    response = await record(client, auth_headers, video["id"], 120, position=30)
    assert response.status_code == 201
    assert response.json()["data"]["position"] == 30

    await record(client, auth_headers, video["id"], 60)

    view = (await client.get(f"/api/videos/{video['id']}", headers=auth_headers)).json()["data"]
    assert view["watchCount"] == 2
    assert view["lastWatchedAt"] is not None


async def test_record_validation(client, auth_headers, other_headers):
    video = await save_video(client, auth_headers, "vid1")
    theirs = await save_video(client, other_headers, "vid2")

    assert (await record(client, auth_headers, video["id"], -5)).status_code == 400
    assert (await record(client, auth_headers, video["id"], 5, position=-1)).status_code == 400
    assert (await record(client, auth_headers, theirs["id"], 5)).status_code == 404


async def test_list_history(client, auth_headers):
    first = await save_video(client, auth_headers, "vid1")
    second = await save_video(client, auth_headers, "vid2")
    await record(client, auth_headers, first["id"], 10)
    await record(client, auth_headers, second["id"], 20)

    body = (await client.get("/api/history", headers=auth_headers)).json()
    assert [entry["duration"] for entry in body["data"]] == [20, 10]

    filtered = (await client.get("/api/history", params={"videoId": first["id"]}, headers=auth_headers)).json()
    assert filtered["pagination"]["total"] == 1

    future = (await client.get("/api/history", params={"startDate": "2999-01-01T00:00:00"}, headers=auth_headers)).json()
    assert future["data"] == []


async def test_stats_are_per_user(client, auth_headers, other_headers):
    first = await save_video(client, auth_headers, "vid1")
    second = await save_video(client, auth_headers, "vid2")
    await record(client, auth_headers, first["id"], 100)
    await record(client, auth_headers, first["id"], 50)
    await record(client, auth_headers, second["id"], 25)

    theirs = await save_video(client, other_headers, "vid3")
    await record(client, other_headers, theirs["id"], 999)

    stats = (await client.get("/api/history/stats", params={"period": "day"}, headers=auth_headers)).json()["data"]
    assert stats == {"period": "day", "totalWatchTime": 175, "totalSessions": 3, "uniqueVideosCount": 2}

    default = (await client.get("/api/history/stats", headers=auth_headers)).json()["data"]
    assert default["period"] == "week"
    assert default["totalSessions"] == 3


async def test_stats_empty(client, auth_headers):
    stats = (await client.get("/api/history/stats", params={"period": "all"}, headers=auth_headers)).json()["data"]
    assert stats == {"period": "all", "totalWatchTime": 0, "totalSessions": 0, "uniqueVideosCount": 0}


async def test_invalid_period(client, auth_headers):
    response = await client.get("/api/history/stats", params={"period": "year"}, headers=auth_headers)
    assert response.status_code == 400


async def test_delete_entry_and_clear(client, auth_headers, other_headers):
    video = await save_video(client, auth_headers, "vid1")
    entry = (await record(client, auth_headers, video["id"], 10)).json()["data"]
    await record(client, auth_headers, video["id"], 20)
    await record(client, auth_headers, video["id"], 30)

    assert (await client.delete(f"/api/history/{entry['id']}", headers=other_headers)).status_code == 404
    assert (await client.delete(f"/api/history/{entry['id']}", headers=auth_headers)).status_code == 200

    response = await client.delete("/api/history", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Deleted 2 history entries"
    assert (await client.get("/api/history", headers=auth_headers)).json()["pagination"]["total"] == 0
