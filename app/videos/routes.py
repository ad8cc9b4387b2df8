"""Saved video routes: list, save from YouTube, update, delete and toggles."""

from typing import Annotated, List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy import and_, false, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.middleware import get_current_user
from app.db import LIKE_ESCAPE, contains_pattern, get_db
from app.errors import ConflictError, ValidationError
from app.logging_config import logger
from app.models.base import utc_now
from app.models.user import User
from app.models.user_video import UserVideo
from app.models.video import Video, VideoTag, normalize_tags
from app.schemas import ApiModel, paginated, success
from app.tags.service import adjust_tag_usage
from app.videos.service import (
    build_view,
    build_views,
    delete_video_cascade,
    get_or_create_overlay,
    get_owned_video,
)
from app.youtube.gateway import YouTubeGateway, get_youtube_gateway

router = APIRouter()

SORT_COLUMNS = {
    "addedAt": Video.added_at,
    "updatedAt": Video.updated_at,
    "title": Video.title,
    "publishedAt": Video.published_at,
    "viewCount": Video.view_count,
}

TOP_TAGS_LIMIT = 5

TagName = Annotated[str, Field(max_length=100)]


# Request/Response models
class SaveVideoRequest(ApiModel):
    """Save a YouTube video to the caller's library."""

    youtube_id: str = Field(..., min_length=1, max_length=32)
    tags: List[TagName] = Field(default_factory=list)


class VideoUpdateRequest(ApiModel):
    """Editable fields; immutable ones (id, youtubeId, addedAt) are ignored."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    tags: Optional[List[TagName]] = None


class TagCount(ApiModel):
    name: str
    count: int


class LibraryStats(ApiModel):
    total_videos: int
    total_liked: int
    total_pinned: int
    total_in_watchlist: int
    top_tags: List[TagCount]


def split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@router.get("")
async def list_videos(
    search: Optional[str] = None,
    tags: Optional[str] = Query(None, description="Comma-separated tag names (OR-matched)"),
    liked: Optional[bool] = None,
    pinned: Optional[bool] = None,
    watchlist: Optional[bool] = None,
    sort_by: str = Query("addedAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List the caller's saved videos merged with their interaction flags.

    Pinned videos come first whatever the sort, unless ``pinned=false``
    is requested explicitly.
    """
    sort_column = SORT_COLUMNS.get(sort_by)
    if sort_column is None:
        raise ValidationError(f"Invalid sortBy; expected one of: {', '.join(SORT_COLUMNS)}")

    is_liked = func.coalesce(UserVideo.is_liked, false())
    is_pinned = func.coalesce(UserVideo.is_pinned, false())
    is_in_watchlist = func.coalesce(UserVideo.is_in_watchlist, false())

    stmt = (
        select(Video)
        .outerjoin(
            UserVideo,
            and_(UserVideo.video_id == Video.id, UserVideo.user_id == user.id),
        )
        .where(Video.added_by == user.id)
    )

    if search:
        pattern = contains_pattern(search.strip())
        stmt = stmt.where(
            or_(
                Video.title.ilike(pattern, escape=LIKE_ESCAPE),
                Video.description.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    tag_names = split_csv(tags)
    if tag_names:
        stmt = stmt.where(
            Video.id.in_(select(VideoTag.video_id).where(VideoTag.name.in_(tag_names)))
        )

    if liked is not None:
        stmt = stmt.where(is_liked == liked)
    if pinned is not None:
        stmt = stmt.where(is_pinned == pinned)
    if watchlist is not None:
        stmt = stmt.where(is_in_watchlist == watchlist)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    ordering = []
    if pinned is not False:
        ordering.append(is_pinned.desc())
    ordering.append(sort_column.asc() if sort_order == "asc" else sort_column.desc())
    ordering.append(Video.id)

    result = await db.execute(
        stmt.order_by(*ordering).limit(limit).offset((page - 1) * limit)
    )
    videos = list(result.scalars().all())

    views = await build_views(db, user.id, videos)
    return paginated(views, page=page, limit=limit, total=total)


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_video(
    request: SaveVideoRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeGateway = Depends(get_youtube_gateway),
):
    """
    Save a YouTube video to the caller's library.

    Metadata is fetched from YouTube. Saving the same YouTube id twice
    yields 409 with the existing record.
    """
    youtube_id = request.youtube_id.strip()

    result = await db.execute(
        select(Video).where(Video.added_by == user.id, Video.youtube_id == youtube_id)
    )
    existing = result.scalar_one_or_none()
    if existing:
        raise ConflictError("Video already saved", data=await build_view(db, user.id, existing))

    details = await youtube.get_video(youtube_id)
    tags = normalize_tags(request.tags)

    video = Video(
        youtube_id=details.youtube_id,
        title=details.title,
        description=details.description,
        thumbnail=details.thumbnail,
        duration=details.duration,
        published_at=details.published_at,
        channel_title=details.channel_title,
        view_count=details.view_count,
        like_count=details.like_count,
        added_by=user.id,
    )
    video.set_tags(tags)
    db.add(video)
    await adjust_tag_usage(db, user.id, added=tags)

    try:
        await db.commit()
    except IntegrityError:
        # Concurrent save of the same id by the same user
        await db.rollback()
        result = await db.execute(
            select(Video).where(Video.added_by == user.id, Video.youtube_id == youtube_id)
        )
        existing = result.scalar_one()
        raise ConflictError("Video already saved", data=await build_view(db, user.id, existing))

    logger.info("Video saved", video_id=str(video.id), youtube_id=youtube_id, user_id=str(user.id))

    return success(await build_view(db, user.id, video), message="Video saved successfully")


@router.get("/stats")
async def library_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Totals of saved, liked, pinned and watchlisted videos plus the most used tags."""
    total_videos = (
        await db.execute(select(func.count(Video.id)).where(Video.added_by == user.id))
    ).scalar() or 0

    overlay_counts = (
        await db.execute(
            select(
                func.count().filter(UserVideo.is_liked.is_(True)),
                func.count().filter(UserVideo.is_pinned.is_(True)),
                func.count().filter(UserVideo.is_in_watchlist.is_(True)),
            )
            .select_from(UserVideo)
            .join(Video, Video.id == UserVideo.video_id)
            .where(UserVideo.user_id == user.id, Video.added_by == user.id)
        )
    ).one()

    tag_count = func.count(VideoTag.video_id)
    top_tags = (
        await db.execute(
            select(VideoTag.name, tag_count)
            .join(Video, Video.id == VideoTag.video_id)
            .where(Video.added_by == user.id)
            .group_by(VideoTag.name)
            .order_by(tag_count.desc(), VideoTag.name)
            .limit(TOP_TAGS_LIMIT)
        )
    ).all()

    return success(
        LibraryStats(
            total_videos=total_videos,
            total_liked=overlay_counts[0] or 0,
            total_pinned=overlay_counts[1] or 0,
            total_in_watchlist=overlay_counts[2] or 0,
            top_tags=[TagCount(name=name, count=count) for name, count in top_tags],
        )
    )


@router.get("/{video_id}")
async def get_video(
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get one of the caller's videos."""
    video = await get_owned_video(db, user.id, video_id)
    return success(await build_view(db, user.id, video))


@router.put("/{video_id}")
async def update_video(
    video_id: UUID,
    request: VideoUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update title, description or tags of one of the caller's videos."""
    video = await get_owned_video(db, user.id, video_id)
    updates = request.model_dump(exclude_unset=True)

    if updates.get("title") is not None:
        video.title = updates["title"].strip()
    if "description" in updates:
        video.description = updates["description"]
    if updates.get("tags") is not None:
        old_tags = video.tags
        new_tags = normalize_tags(updates["tags"])
        video.set_tags(new_tags)
        await adjust_tag_usage(
            db,
            user.id,
            added=[name for name in new_tags if name not in old_tags],
            removed=[name for name in old_tags if name not in new_tags],
        )

    video.updated_at = utc_now()
    await db.commit()

    logger.info("Video updated", video_id=str(video.id), fields=sorted(updates))

    return success(await build_view(db, user.id, video), message="Video updated successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete one of the caller's videos and everything that references it."""
    video = await get_owned_video(db, user.id, video_id)
    await delete_video_cascade(db, video)
    await db.commit()

    return success(message="Video deleted successfully")


async def toggle_flag(
    db: AsyncSession,
    user: User,
    video_id: UUID,
    flag: str,
    stamp: str,
):
    video = await get_owned_video(db, user.id, video_id)
    overlay = await get_or_create_overlay(db, user.id, video.id)

    enabled = not getattr(overlay, flag)
    setattr(overlay, flag, enabled)
    setattr(overlay, stamp, utc_now() if enabled else None)
    await db.commit()

    logger.info("Video flag toggled", video_id=str(video.id), flag=flag, enabled=enabled)

    return video, enabled


@router.patch("/{video_id}/like")
async def toggle_like(
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Like or unlike a video."""
    video, enabled = await toggle_flag(db, user, video_id, "is_liked", "liked_at")
    return success(
        await build_view(db, user.id, video),
        message=f"Video {'liked' if enabled else 'unliked'} successfully",
    )


@router.patch("/{video_id}/pin")
async def toggle_pin(
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Pin or unpin a video."""
    video, enabled = await toggle_flag(db, user, video_id, "is_pinned", "pinned_at")
    return success(
        await build_view(db, user.id, video),
        message=f"Video {'pinned' if enabled else 'unpinned'} successfully",
    )


@router.patch("/{video_id}/watchlist")
async def toggle_watchlist(
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Add a video to or remove it from the watchlist."""
    video, enabled = await toggle_flag(
        db, user, video_id, "is_in_watchlist", "added_to_watchlist_at"
    )
    return success(
        await build_view(db, user.id, video),
        message=f"Video {'added to' if enabled else 'removed from'} watchlist successfully",
    )
