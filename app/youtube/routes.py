"""YouTube search, lookup and tag-based recommendation routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.middleware import get_current_user
from app.db import get_db
from app.errors import ValidationError
from app.models.tag import Tag
from app.models.user import User
from app.models.video import normalize_tags
from app.schemas import ApiModel, success
from app.youtube.gateway import YouTubeGateway, get_youtube_gateway
from app.youtube.recommendations import DEFAULT_MAX_RESULTS, recommend

router = APIRouter()


class TagSearchRequest(ApiModel):
    tags: List[str] = Field(default_factory=list)
    max_results: int = Field(20, ge=1, le=50)


@router.get("/search")
async def search(
    q: Optional[str] = None,
    max_results: int = Query(25, alias="maxResults", ge=1, le=50),
    user: User = Depends(get_current_user),
    youtube: YouTubeGateway = Depends(get_youtube_gateway),
):
    """Free-text YouTube search."""
    if not q or not q.strip():
        raise ValidationError("Search query is required")

    videos = await youtube.search(q.strip(), max_results)
    return success(videos, count=len(videos))


@router.get("/video/{youtube_id}")
async def get_video(
    youtube_id: str,
    user: User = Depends(get_current_user),
    youtube: YouTubeGateway = Depends(get_youtube_gateway),
):
    return success(await youtube.get_video(youtube_id))


@router.post("/search-by-tags")
async def search_by_tags(
    request: TagSearchRequest,
    user: User = Depends(get_current_user),
    youtube: YouTubeGateway = Depends(get_youtube_gateway),
):
    """One search per tag, merged and ranked by view count."""
    tags = normalize_tags(request.tags)
    if not tags:
        raise ValidationError("Tags array is required")

    videos = await youtube.search_by_tags(tags, request.max_results)
    return success(videos, count=len(videos), searchedTags=tags)


@router.get("/recommendations")
async def recommendations(
    tags: Optional[str] = Query(None, description="Comma-separated tag names"),
    max_results: int = Query(DEFAULT_MAX_RESULTS, alias="maxResults", ge=1, le=50),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeGateway = Depends(get_youtube_gateway),
):
    """
    Recommend videos for the selected tags.

    Without a selection the caller's three most used tags are searched.
    """
    result = await db.execute(select(Tag).where(Tag.owner_id == user.id))
    vocabulary = list(result.scalars().all())

    selected = normalize_tags(tags.split(",")) if tags else None
    return success(await recommend(youtube, vocabulary, selected, max_results))
