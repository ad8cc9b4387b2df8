"""
YouTube Data API gateway.

Wraps the YouTube Data API v3 ``search`` and ``videos`` endpoints and
normalizes their items into :class:`YouTubeVideo` records, so the rest of
the application never sees the upstream schema or the ISO-8601 duration
encoding.

The API key and HTTP transport are injected through the constructor; a
gateway without a key raises :class:`YouTubeUnavailableError` for direct
lookups and returns no results for tag searches.
"""

import asyncio
import math
import re
from datetime import datetime
from typing import Iterable, List, Optional

import httpx
from fastapi import Request

from app.errors import NotFoundError, UpstreamUnavailableError
from app.logging_config import logger
from app.schemas import ApiModel

DEFAULT_BASE_URL = "https://www.googleapis.com/youtube/v3"

DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


class YouTubeUnavailableError(UpstreamUnavailableError):
    """No API key configured."""


class YouTubeRequestFailedError(UpstreamUnavailableError):
    """Upstream returned a non-2xx response or could not be reached."""


class YouTubeVideoNotFoundError(NotFoundError):
    """Upstream has no video with the requested id."""


class YouTubeVideo(ApiModel):
    """Normalized YouTube video metadata."""

    youtube_id: str
    title: str
    description: Optional[str] = None
    thumbnail: str
    duration: str
    duration_seconds: int
    published_at: Optional[datetime] = None
    channel_title: str
    view_count: int = 0
    like_count: int = 0


def parse_duration(duration: Optional[str]) -> int:
    """Convert an ISO-8601 duration (``PT1H2M3S``) to seconds.

    Any component may be missing and counts as zero. Values that do not
    look like a duration at all yield 0.
    """
    if not duration:
        return 0

    match = DURATION_PATTERN.match(duration.strip().upper())
    if not match:
        return 0

    parts = {name: int(value or 0) for name, value in match.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]


def format_duration(duration: Optional[str]) -> str:
    """Human-readable ``H:MM:SS`` or ``M:SS`` form of an ISO-8601 duration."""
    total_seconds = parse_duration(duration)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def pick_thumbnail(thumbnails: dict) -> str:
    """Prefer the medium thumbnail, then default, then whatever exists."""
    for size in ("medium", "default", "high", "standard", "maxres"):
        if thumbnails.get(size, {}).get("url"):
            return thumbnails[size]["url"]
    return ""


def normalize_video(item: dict) -> YouTubeVideo:
    """Map a ``videos`` API item onto :class:`YouTubeVideo`."""
    snippet = item.get("snippet", {})
    content_details = item.get("contentDetails", {})
    statistics = item.get("statistics", {})
    duration = content_details.get("duration") or "PT0S"

    return YouTubeVideo(
        youtube_id=item["id"],
        title=snippet.get("title", ""),
        description=snippet.get("description"),
        thumbnail=pick_thumbnail(snippet.get("thumbnails", {})),
        duration=duration,
        duration_seconds=parse_duration(duration),
        published_at=snippet.get("publishedAt"),
        channel_title=snippet.get("channelTitle", ""),
        view_count=int(statistics.get("viewCount") or 0),
        like_count=int(statistics.get("likeCount") or 0),
    )


class YouTubeGateway:
    """Async client for the YouTube Data API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            api_key: YouTube Data API key; None disables the gateway
            base_url: API root
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject a mock)
        """
        self.api_key = api_key
        self.base_url = base_url
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

        if not api_key:
            logger.warning("YouTube API key not configured; YouTube features are disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def _get(self, path: str, params: dict) -> dict:
        if not self.api_key:
            raise YouTubeUnavailableError("YouTube API key not configured")

        try:
            response = await self.client.get(path, params={**params, "key": self.api_key})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "YouTube API error",
                path=path,
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise YouTubeRequestFailedError(
                "YouTube request failed",
                detail=f"{path} returned {e.response.status_code}",
            )
        except httpx.HTTPError as e:
            logger.error("YouTube API unreachable", path=path, error=str(e))
            raise YouTubeRequestFailedError("YouTube request failed", detail=str(e))

    async def _fetch_details(self, video_ids: Iterable[str]) -> List[YouTubeVideo]:
        ids = ",".join(video_ids)
        if not ids:
            return []

        data = await self._get("/videos", {"id": ids, "part": "snippet,contentDetails,statistics"})
        return [normalize_video(item) for item in data.get("items", [])]

    async def search(self, query: str, max_results: int = 25) -> List[YouTubeVideo]:
        """
        Search videos by free text.

        Args:
            query: Search terms
            max_results: Upper bound on returned videos (API maximum is 50)

        Returns:
            Normalized videos, in upstream relevance order

        Raises:
            YouTubeUnavailableError: No API key configured
            YouTubeRequestFailedError: Upstream failure
        """
        data = await self._get(
            "/search",
            {
                "q": query,
                "part": "snippet",
                "type": "video",
                "maxResults": max(1, min(max_results, 50)),
                "order": "relevance",
                "safeSearch": "moderate",
            },
        )

        video_ids = [
            item["id"]["videoId"]
            for item in data.get("items", [])
            if item.get("id", {}).get("videoId")
        ]
        return await self._fetch_details(video_ids)

    async def get_video(self, youtube_id: str) -> YouTubeVideo:
        """
        Get one video by its YouTube id.

        Raises:
            YouTubeVideoNotFoundError: Upstream has no such video
        """
        videos = await self._fetch_details([youtube_id])
        if not videos:
            raise YouTubeVideoNotFoundError("YouTube video not found")
        return videos[0]

    async def _search_tag(self, tag: str, max_results: int) -> List[YouTubeVideo]:
        try:
            return await self.search(tag, max_results)
        except UpstreamUnavailableError as e:
            logger.warning("Tag search failed", tag=tag, error=e.message)
            return []
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Tag search returned malformed data", tag=tag, error=str(e))
            return []

    async def search_by_tags(self, tags: List[str], max_results: int = 10) -> List[YouTubeVideo]:
        """
        Search once per tag concurrently and merge the results.

        Each tag gets an equal share of ``max_results``. Results are
        deduplicated by YouTube id (first occurrence wins), ordered by view
        count and truncated. A failing tag contributes nothing; with no key
        or no tags the result is empty.
        """
        if not self.api_key or not tags or max_results <= 0:
            return []

        per_tag = math.ceil(max_results / len(tags))
        results = await asyncio.gather(*(self._search_tag(tag, per_tag) for tag in tags))

        unique = {}
        for videos in results:
            for video in videos:
                unique.setdefault(video.youtube_id, video)

        ranked = sorted(unique.values(), key=lambda video: video.view_count, reverse=True)
        return ranked[:max_results]


def get_youtube_gateway(request: Request) -> YouTubeGateway:
    """Dependency returning the gateway created at application start-up."""
    return request.app.state.youtube
