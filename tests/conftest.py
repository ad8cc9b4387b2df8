"""Shared fixtures: in-memory database, ASGI client and a fake YouTube API."""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENABLE_PROMETHEUS"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PASSWORD_HASH_TIME_COST"] = "1"
os.environ["PASSWORD_HASH_MEMORY_COST"] = "1024"
os.environ["PASSWORD_HASH_PARALLELISM"] = "1"
os.environ.pop("YOUTUBE_API_KEY", None)
os.environ.pop("GOOGLE_CLIENT_ID", None)
os.environ.pop("GOOGLE_CLIENT_SECRET", None)

import httpx
import pytest

from app.db import engine
from app.main import app
from app.models import Base
from app.youtube.gateway import YouTubeGateway, get_youtube_gateway


def video_item(youtube_id, title, views, duration="PT4M13S", thumbnails=None):
    return {
        "id": youtube_id,
        "snippet": {
            "title": title,
            "description": f"{title} description",
            "thumbnails": thumbnails or {
                "default": {"url": f"https://i.ytimg.com/vi/{youtube_id}/default.jpg"},
                "medium": {"url": f"https://i.ytimg.com/vi/{youtube_id}/mqdefault.jpg"},
            },
            "publishedAt": "2024-01-15T10:00:00Z",
            "channelTitle": "Test Channel",
        },
        "contentDetails": {"duration": duration},
        "statistics": {"viewCount": str(views), "likeCount": "10"},
    }


CATALOG = {
    "vid1": video_item("vid1", "Lo-fi Beats", 1000),
    "vid2": video_item("vid2", "Jazz Classics", 5000, duration="PT1H2M3S"),
    "vid3": video_item("vid3", "Rock Anthems", 300, duration="PT45S"),
}

SEARCH_RESULTS = {
    "music": ["vid1", "vid2"],
    "jazz": ["vid2", "vid3"],
    "rock": ["vid3"],
}

# Queries for which the fake API answers with a server error
FAILING_QUERIES = {"fail"}


def youtube_handler(request: httpx.Request) -> httpx.Response:
    """Serve ``/search`` and ``/videos`` from the in-memory catalog."""
    params = request.url.params

    if request.url.path.endswith("/search"):
        query = params.get("q", "")
        if query in FAILING_QUERIES:
            return httpx.Response(500, json={"error": {"message": "backend error"}})
        ids = SEARCH_RESULTS.get(query, [])[: int(params.get("maxResults", 25))]
        return httpx.Response(200, json={"items": [{"id": {"kind": "youtube#video", "videoId": vid}} for vid in ids]})

    if request.url.path.endswith("/videos"):
        ids = [vid for vid in params.get("id", "").split(",") if vid]
        return httpx.Response(200, json={"items": [CATALOG[vid] for vid in ids if vid in CATALOG]})

    return httpx.Response(404, json={"error": {"message": "not found"}})


@pytest.fixture
def youtube_transport():
    return httpx.MockTransport(youtube_handler)


@pytest.fixture
async def gateway(youtube_transport):
    gateway = YouTubeGateway("test-key", transport=youtube_transport)
    yield gateway
    await gateway.close()


@pytest.fixture
async def client(gateway):
    """HTTP client bound to the app with a fresh in-memory database."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.dependency_overrides[get_youtube_gateway] = lambda: gateway
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    # Dropping the single pooled connection discards the in-memory database
    await engine.dispose()


async def register(client, email="alice@example.com", password="secret123", name="Alice"):
    response = await client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
async def auth_headers(client):
    data = await register(client)
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
async def other_headers(client):
    data = await register(client, email="bob@example.com", name="Bob")
    return {"Authorization": f"Bearer {data['token']}"}


async def save_video(client, headers, youtube_id="vid1", tags=None):
    response = await client.post(
        "/api/videos",
        json={"youtubeId": youtube_id, "tags": tags or []},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
