"""Watch history routes and viewing statistics."""

from datetime import datetime, timedelta
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy import delete, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.middleware import get_current_user
from app.db import get_db
from app.errors import NotFoundError
from app.logging_config import logger
from app.models.base import utc_now
from app.models.history import History
from app.models.user import User
from app.schemas import ApiModel, paginated, success
from app.videos.service import get_or_create_overlay, get_owned_video

router = APIRouter()

PERIODS = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}


class HistoryCreateRequest(ApiModel):
    video_id: UUID
    duration: int = Field(..., ge=0, description="Seconds watched")
    position: int = Field(0, ge=0, description="Last playback position in seconds")


class HistoryView(ApiModel):
    id: UUID
    user_id: UUID
    video_id: UUID
    watched_at: datetime
    duration: int
    position: int


class WatchStats(ApiModel):
    period: str
    total_watch_time: int
    total_sessions: int
    unique_videos_count: int


@router.get("")
async def list_history(
    video_id: Optional[UUID] = Query(None, alias="videoId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's viewing sessions, most recent first."""
    stmt = select(History).where(History.user_id == user.id)

    if video_id:
        stmt = stmt.where(History.video_id == video_id)
    if start_date:
        stmt = stmt.where(History.watched_at >= start_date)
    if end_date:
        stmt = stmt.where(History.watched_at <= end_date)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    result = await db.execute(
        stmt.order_by(History.watched_at.desc(), History.id).limit(limit).offset((page - 1) * limit)
    )
    entries = [HistoryView.model_validate(entry) for entry in result.scalars().all()]

    return paginated(entries, page=page, limit=limit, total=total)


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_watch(
    request: HistoryCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a viewing session.

    Also bumps the caller's watch count for the video and stamps the
    last-watched time.
    """
    video = await get_owned_video(db, user.id, request.video_id)
    now = utc_now()

    entry = History(
        user_id=user.id,
        video_id=video.id,
        watched_at=now,
        duration=request.duration,
        position=request.position,
    )
    db.add(entry)

    overlay = await get_or_create_overlay(db, user.id, video.id)
    overlay.watch_count = (overlay.watch_count or 0) + 1
    overlay.last_watched_at = now

    await db.commit()

    logger.info("Watch recorded", video_id=str(video.id), duration=request.duration)

    return success(HistoryView.model_validate(entry), message="Watch history recorded")


@router.get("/stats")
async def watch_stats(
    period: Literal["day", "week", "month", "all"] = "week",
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Total watch time, session count and distinct videos over a trailing period."""
    stmt = select(
        func.coalesce(func.sum(History.duration), 0),
        func.count(History.id),
        func.count(distinct(History.video_id)),
    ).where(History.user_id == user.id)

    window = PERIODS.get(period)
    if window is not None:
        stmt = stmt.where(History.watched_at >= utc_now() - window)

    total_watch_time, total_sessions, unique_videos = (await db.execute(stmt)).one()

    return success(
        WatchStats(
            period=period,
            total_watch_time=total_watch_time or 0,
            total_sessions=total_sessions or 0,
            unique_videos_count=unique_videos or 0,
        )
    )


@router.delete("")
async def clear_history(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete every history entry of the caller."""
    result = await db.execute(delete(History).where(History.user_id == user.id))
    await db.commit()

    logger.info("History cleared", user_id=str(user.id), deleted=result.rowcount)

    return success(message=f"Deleted {result.rowcount} history entries")


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(History).where(History.id == entry_id, History.user_id == user.id)
    )
    entry = result.scalar_one_or_none()

    if not entry:
        raise NotFoundError("History entry not found")

    await db.delete(entry)
    await db.commit()

    return success(message="History entry deleted")
