"""Owner-scoped video lookups and the merged video + interaction view."""

from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError
from app.logging_config import logger
from app.models.history import History
from app.models.note import Note
from app.models.playlist import Playlist
from app.models.user_video import UserVideo
from app.models.video import Video
from app.schemas import ApiModel
from app.tags.service import adjust_tag_usage
from app.youtube.gateway import parse_duration


class VideoView(ApiModel):
    """Saved video merged with the caller's interaction overlay."""

    id: UUID
    youtube_id: str
    title: str
    description: Optional[str] = None
    thumbnail: str
    duration: str
    duration_seconds: int
    published_at: Optional[datetime] = None
    channel_title: str
    view_count: int
    like_count: int
    tags: List[str]
    added_by: UUID
    added_at: datetime
    updated_at: datetime
    is_liked: bool = False
    is_pinned: bool = False
    is_in_watchlist: bool = False
    watch_count: int = 0
    last_watched_at: Optional[datetime] = None
    liked_at: Optional[datetime] = None
    pinned_at: Optional[datetime] = None
    added_to_watchlist_at: Optional[datetime] = None


def to_view(video: Video, overlay: Optional[UserVideo] = None) -> VideoView:
    view = VideoView(
        id=video.id,
        youtube_id=video.youtube_id,
        title=video.title,
        description=video.description,
        thumbnail=video.thumbnail,
        duration=video.duration,
        duration_seconds=parse_duration(video.duration),
        published_at=video.published_at,
        channel_title=video.channel_title,
        view_count=video.view_count or 0,
        like_count=video.like_count or 0,
        tags=video.tags,
        added_by=video.added_by,
        added_at=video.added_at,
        updated_at=video.updated_at,
    )

    if overlay is not None:
        view.is_liked = overlay.is_liked
        view.is_pinned = overlay.is_pinned
        view.is_in_watchlist = overlay.is_in_watchlist
        view.watch_count = overlay.watch_count
        view.last_watched_at = overlay.last_watched_at
        view.liked_at = overlay.liked_at
        view.pinned_at = overlay.pinned_at
        view.added_to_watchlist_at = overlay.added_to_watchlist_at

    return view


async def get_owned_video(db: AsyncSession, user_id: UUID, video_id: UUID) -> Video:
    """Fetch a video owned by ``user_id``.

    Raises:
        NotFoundError: If the video does not exist or belongs to someone else
    """
    result = await db.execute(
        select(Video).where(Video.id == video_id, Video.added_by == user_id)
    )
    video = result.scalar_one_or_none()

    if not video:
        raise NotFoundError("Video not found")

    return video


async def load_overlays(db: AsyncSession, user_id: UUID, video_ids: Iterable[UUID]) -> Dict[UUID, UserVideo]:
    ids = list(video_ids)
    if not ids:
        return {}

    result = await db.execute(
        select(UserVideo).where(UserVideo.user_id == user_id, UserVideo.video_id.in_(ids))
    )
    return {overlay.video_id: overlay for overlay in result.scalars().all()}


async def build_views(db: AsyncSession, user_id: UUID, videos: List[Video]) -> List[VideoView]:
    """Merge each video with the caller's overlay, keeping input order."""
    overlays = await load_overlays(db, user_id, [video.id for video in videos])
    return [to_view(video, overlays.get(video.id)) for video in videos]


async def build_view(db: AsyncSession, user_id: UUID, video: Video) -> VideoView:
    return (await build_views(db, user_id, [video]))[0]


async def get_or_create_overlay(db: AsyncSession, user_id: UUID, video_id: UUID) -> UserVideo:
    """Fetch the caller's interaction row for a video, creating it on first use."""
    result = await db.execute(
        select(UserVideo).where(UserVideo.user_id == user_id, UserVideo.video_id == video_id)
    )
    overlay = result.scalar_one_or_none()

    if overlay is None:
        overlay = UserVideo(
            user_id=user_id,
            video_id=video_id,
            is_liked=False,
            is_pinned=False,
            is_in_watchlist=False,
            watch_count=0,
        )
        db.add(overlay)

    return overlay


async def delete_video_cascade(db: AsyncSession, video: Video):
    """Delete a video together with every row that references it.

    Interactions, notes and history entries are removed, the video is
    dropped from the owner's playlists and the owner's tag counters are
    decremented.
    """
    video_id = video.id
    owner_id = video.added_by

    await db.execute(delete(UserVideo).where(UserVideo.video_id == video_id))
    await db.execute(delete(Note).where(Note.video_id == video_id))
    await db.execute(delete(History).where(History.video_id == video_id))

    result = await db.execute(select(Playlist).where(Playlist.owner_id == owner_id))
    for playlist in result.scalars().all():
        if str(video_id) in (playlist.video_ids or []):
            playlist.video_ids = [vid for vid in playlist.video_ids if vid != str(video_id)]

    await adjust_tag_usage(db, owner_id, removed=video.tags)
    await db.delete(video)

    logger.info("Video deleted with dependents", video_id=str(video_id), user_id=str(owner_id))
