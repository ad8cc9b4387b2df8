"""Timestamped video note routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.middleware import get_current_user
from app.db import LIKE_ESCAPE, contains_pattern, get_db
from app.errors import NotFoundError, ValidationError
from app.logging_config import logger
from app.models.note import Note
from app.models.user import User
from app.schemas import ApiModel, paginated, success
from app.videos.service import get_owned_video

router = APIRouter()


class NoteCreateRequest(ApiModel):
    video_id: UUID
    content: str
    timestamp: Optional[int] = Field(None, ge=0, description="Seconds into the video")


class NoteUpdateRequest(ApiModel):
    content: Optional[str] = None
    timestamp: Optional[int] = Field(None, ge=0)


class NoteView(ApiModel):
    id: UUID
    user_id: UUID
    video_id: UUID
    content: str
    timestamp: Optional[int] = None
    created_at: datetime
    updated_at: datetime


def clean_content(content: str) -> str:
    cleaned = content.strip()
    if not cleaned:
        raise ValidationError("Note content is required")
    return cleaned


async def get_owned_note(db: AsyncSession, user_id: UUID, note_id: UUID) -> Note:
    result = await db.execute(select(Note).where(Note.id == note_id, Note.user_id == user_id))
    note = result.scalar_one_or_none()

    if not note:
        raise NotFoundError("Note not found")

    return note


@router.get("")
async def list_notes(
    video_id: Optional[UUID] = Query(None, alias="videoId"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's notes, newest first."""
    stmt = select(Note).where(Note.user_id == user.id)

    if video_id:
        stmt = stmt.where(Note.video_id == video_id)
    if search:
        stmt = stmt.where(Note.content.ilike(contains_pattern(search.strip()), escape=LIKE_ESCAPE))

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    result = await db.execute(
        stmt.order_by(Note.created_at.desc(), Note.id).limit(limit).offset((page - 1) * limit)
    )
    notes = [NoteView.model_validate(note) for note in result.scalars().all()]

    return paginated(notes, page=page, limit=limit, total=total)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Attach a note to one of the caller's videos."""
    content = clean_content(request.content)
    video = await get_owned_video(db, user.id, request.video_id)

    note = Note(user_id=user.id, video_id=video.id, content=content, timestamp=request.timestamp)
    db.add(note)
    await db.commit()

    logger.info("Note created", note_id=str(note.id), video_id=str(video.id))

    return success(NoteView.model_validate(note), message="Note created successfully")


@router.get("/{note_id}")
async def get_note(
    note_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    note = await get_owned_note(db, user.id, note_id)
    return success(NoteView.model_validate(note))


@router.put("/{note_id}")
async def update_note(
    note_id: UUID,
    request: NoteUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    note = await get_owned_note(db, user.id, note_id)
    updates = request.model_dump(exclude_unset=True)

    if updates.get("content") is not None:
        note.content = clean_content(updates["content"])
    if "timestamp" in updates:
        note.timestamp = updates["timestamp"]

    await db.commit()

    return success(NoteView.model_validate(note), message="Note updated successfully")


@router.delete("/{note_id}")
async def delete_note(
    note_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    note = await get_owned_note(db, user.id, note_id)
    await db.delete(note)
    await db.commit()

    logger.info("Note deleted", note_id=str(note_id), user_id=str(user.id))

    return success(message="Note deleted successfully")
