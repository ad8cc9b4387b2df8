"""Tag-based video recommendations."""

from typing import List, Optional, Sequence

from app.models.tag import Tag
from app.schemas import ApiModel
from app.youtube.gateway import YouTubeGateway, YouTubeVideo

DEFAULT_TAG_COUNT = 3
DEFAULT_MAX_RESULTS = 12


class Recommendations(ApiModel):
    tags: List[str]
    videos: List[YouTubeVideo]


def select_default_tags(tags: Sequence[Tag], count: int = DEFAULT_TAG_COUNT) -> List[str]:
    """Names of the ``count`` most-used tags, ties broken alphabetically."""
    ranked = sorted(tags, key=lambda tag: (-(tag.usage_count or 0), tag.name))
    return [tag.name for tag in ranked[:count]]


async def recommend(
    gateway: YouTubeGateway,
    vocabulary: Sequence[Tag],
    selected: Optional[List[str]] = None,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> Recommendations:
    """Search YouTube for the selected tags, or the caller's top tags when none are selected."""
    tags = selected if selected else select_default_tags(vocabulary)
    videos = await gateway.search_by_tags(tags, max_results)
    return Recommendations(tags=tags, videos=videos)
