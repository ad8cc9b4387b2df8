"""Playlist routes: ordered, owner-scoped collections of saved videos."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.middleware import get_current_user
from app.db import LIKE_ESCAPE, contains_pattern, get_db
from app.errors import NotFoundError, ValidationError
from app.logging_config import logger
from app.models.playlist import Playlist
from app.models.user import User
from app.models.video import Video
from app.schemas import ApiModel, paginated, success
from app.videos.service import VideoView, build_views, get_owned_video

router = APIRouter()


# Request/Response models
class PlaylistCreateRequest(ApiModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = None


class PlaylistUpdateRequest(ApiModel):
    """Any subset of fields; ``videoIds`` replaces the whole ordering."""

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    video_ids: Optional[List[UUID]] = None


class AddVideoRequest(ApiModel):
    video_id: UUID


class PlaylistView(ApiModel):
    id: UUID
    owner_id: UUID
    name: str
    description: Optional[str] = None
    video_ids: List[str]
    video_count: int
    created_at: datetime
    updated_at: datetime


class PlaylistDetail(PlaylistView):
    videos: List[VideoView]


def to_view(playlist: Playlist) -> PlaylistView:
    video_ids = list(playlist.video_ids or [])
    return PlaylistView(
        id=playlist.id,
        owner_id=playlist.owner_id,
        name=playlist.name,
        description=playlist.description,
        video_ids=video_ids,
        video_count=len(video_ids),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


def clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Playlist name is required")
    return cleaned


async def get_owned_playlist(db: AsyncSession, user_id: UUID, playlist_id: UUID) -> Playlist:
    result = await db.execute(
        select(Playlist).where(Playlist.id == playlist_id, Playlist.owner_id == user_id)
    )
    playlist = result.scalar_one_or_none()

    if not playlist:
        raise NotFoundError("Playlist not found")

    return playlist


async def resolve_videos(db: AsyncSession, user_id: UUID, video_ids: List[str]) -> List[Video]:
    """Load the owner's videos for the given ids, in the given order.

    Ids that no longer resolve to one of the owner's videos are skipped.
    """
    if not video_ids:
        return []

    result = await db.execute(
        select(Video).where(
            Video.added_by == user_id,
            Video.id.in_([UUID(video_id) for video_id in video_ids]),
        )
    )
    by_id = {str(video.id): video for video in result.scalars().all()}
    return [by_id[video_id] for video_id in video_ids if video_id in by_id]


async def build_detail(db: AsyncSession, user_id: UUID, playlist: Playlist) -> PlaylistDetail:
    videos = await resolve_videos(db, user_id, list(playlist.video_ids or []))
    views = await build_views(db, user_id, videos)
    return PlaylistDetail(**to_view(playlist).model_dump(), videos=views)


@router.get("")
async def list_playlists(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's playlists, most recently updated first."""
    stmt = select(Playlist).where(Playlist.owner_id == user.id)

    if search:
        stmt = stmt.where(Playlist.name.ilike(contains_pattern(search.strip()), escape=LIKE_ESCAPE))

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    result = await db.execute(
        stmt.order_by(Playlist.updated_at.desc(), Playlist.id)
        .limit(limit)
        .offset((page - 1) * limit)
    )
    playlists = [to_view(playlist) for playlist in result.scalars().all()]

    return paginated(playlists, page=page, limit=limit, total=total)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_playlist(
    request: PlaylistCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create an empty playlist."""
    playlist = Playlist(
        owner_id=user.id,
        name=clean_name(request.name),
        description=request.description,
        video_ids=[],
    )
    db.add(playlist)
    await db.commit()

    logger.info("Playlist created", playlist_id=str(playlist.id), user_id=str(user.id))

    return success(to_view(playlist), message="Playlist created successfully")


@router.get("/{playlist_id}")
async def get_playlist(
    playlist_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a playlist with its videos resolved in playlist order."""
    playlist = await get_owned_playlist(db, user.id, playlist_id)
    return success(await build_detail(db, user.id, playlist))


@router.put("/{playlist_id}")
async def update_playlist(
    playlist_id: UUID,
    request: PlaylistUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update a playlist.

    ``videoIds`` is a full reorder: every id must be one of the caller's
    videos, and repeated ids are collapsed to their first occurrence.
    """
    playlist = await get_owned_playlist(db, user.id, playlist_id)
    updates = request.model_dump(exclude_unset=True)

    if updates.get("name") is not None:
        playlist.name = clean_name(updates["name"])
    if "description" in updates:
        playlist.description = updates["description"]

    if updates.get("video_ids") is not None:
        ordered = list(dict.fromkeys(str(video_id) for video_id in updates["video_ids"]))
        owned = await resolve_videos(db, user.id, ordered)
        if len(owned) != len(ordered):
            raise NotFoundError("Video not found")
        playlist.video_ids = ordered

    await db.commit()

    logger.info("Playlist updated", playlist_id=str(playlist.id), fields=sorted(updates))

    return success(await build_detail(db, user.id, playlist), message="Playlist updated successfully")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await get_owned_playlist(db, user.id, playlist_id)
    await db.delete(playlist)
    await db.commit()

    logger.info("Playlist deleted", playlist_id=str(playlist_id), user_id=str(user.id))

    return success(message="Playlist deleted successfully")


@router.post("/{playlist_id}/videos")
async def add_video(
    playlist_id: UUID,
    request: AddVideoRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Append a video to the playlist. Adding a video already present is a no-op."""
    playlist = await get_owned_playlist(db, user.id, playlist_id)
    video = await get_owned_video(db, user.id, request.video_id)

    video_id = str(video.id)
    if video_id not in (playlist.video_ids or []):
        # JSON columns only track reassignment
        playlist.video_ids = [*(playlist.video_ids or []), video_id]
        await db.commit()

    return success(await build_detail(db, user.id, playlist), message="Video added to playlist")


@router.delete("/{playlist_id}/videos/{video_id}")
async def remove_video(
    playlist_id: UUID,
    video_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove a video from the playlist. Removing an absent video is a no-op."""
    playlist = await get_owned_playlist(db, user.id, playlist_id)

    if str(video_id) in (playlist.video_ids or []):
        playlist.video_ids = [vid for vid in playlist.video_ids if vid != str(video_id)]
        await db.commit()

    return success(await build_detail(db, user.id, playlist), message="Video removed from playlist")
