"""Tests for the YouTube search and recommendation routes."""

from app.config import settings
from conftest import save_video


async def test_search(client, auth_headers):
    response = await client.get("/api/youtube/search", params={"q": "jazz"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [video["youtubeId"] for video in body["data"]] == ["vid2", "vid3"]
    assert body["data"][0]["durationSeconds"] == 3723


async def test_search_requires_query(client, auth_headers):
    response = await client.get("/api/youtube/search", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Search query is required"


async def test_search_requires_authentication(client):
    response = await client.get("/api/youtube/search", params={"q": "jazz"})
    assert response.status_code == 401


async def test_search_upstream_failure(client, auth_headers):
    response = await client.get("/api/youtube/search", params={"q": "fail"}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "message" not in response.json()


async def test_upstream_failure_detail_only_in_development(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "environment", "development")

    response = await client.get("/api/youtube/search", params={"q": "fail"}, headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "YouTube request failed"
    assert body["message"] == "/search returned 500"


async def test_video_lookup(client, auth_headers):
    response = await client.get("/api/youtube/video/vid1", headers=auth_headers)
    assert response.json()["data"]["title"] == "Lo-fi Beats"

    missing = await client.get("/api/youtube/video/missing", headers=auth_headers)
    assert missing.status_code == 404


async def test_search_by_tags(client, auth_headers):
    response = await client.post(
        "/api/youtube/search-by-tags", json={"tags": ["Music", "jazz"], "maxResults": 2}, headers=auth_headers
    )

    body = response.json()
    assert [video["youtubeId"] for video in body["data"]] == ["vid2", "vid1"]
    assert body["searchedTags"] == ["music", "jazz"]


async def test_search_by_tags_requires_tags(client, auth_headers):
    response = await client.post("/api/youtube/search-by-tags", json={"tags": []}, headers=auth_headers)
    assert response.status_code == 400


async def test_recommendations_default_to_top_tags(client, auth_headers):
    for name in ("rock", "jazz", "music", "blues"):
        await client.post("/api/tags", json={"name": name}, headers=auth_headers)
    await save_video(client, auth_headers, "vid1", tags=["rock"])
    await save_video(client, auth_headers, "vid2", tags=["rock", "jazz"])

    data = (await client.get("/api/youtube/recommendations", headers=auth_headers)).json()["data"]

    assert data["tags"] == ["rock", "jazz", "blues"]
    assert [video["youtubeId"] for video in data["videos"]] == ["vid2", "vid3"]


async def test_recommendations_with_selection(client, auth_headers):
    response = await client.get(
        "/api/youtube/recommendations", params={"tags": "Music", "maxResults": 1}, headers=auth_headers
    )

    data = response.json()["data"]
    assert data["tags"] == ["music"]
    assert [video["youtubeId"] for video in data["videos"]] == ["vid1"]
