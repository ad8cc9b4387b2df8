"""Tag registry routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.middleware import get_current_user
from app.db import LIKE_ESCAPE, contains_pattern, get_db
from app.errors import ConflictError, NotFoundError, ValidationError
from app.logging_config import logger
from app.models.tag import DEFAULT_TAG_COLOR, Tag
from app.models.user import User
from app.schemas import ApiModel, paginated, success

router = APIRouter()

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class TagCreateRequest(ApiModel):
    name: str = Field(..., max_length=100)
    color: str = Field(DEFAULT_TAG_COLOR, pattern=HEX_COLOR_PATTERN)


class TagUpdateRequest(ApiModel):
    name: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class TagView(ApiModel):
    id: UUID
    name: str
    color: str
    usage_count: int
    created_at: datetime
    updated_at: datetime


def clean_name(name: str) -> str:
    cleaned = name.strip().lower()
    if not cleaned:
        raise ValidationError("Tag name is required")
    return cleaned


async def get_owned_tag(db: AsyncSession, user_id: UUID, tag_id: UUID) -> Tag:
    result = await db.execute(select(Tag).where(Tag.id == tag_id, Tag.owner_id == user_id))
    tag = result.scalar_one_or_none()

    if not tag:
        raise NotFoundError("Tag not found")

    return tag


async def find_tag_by_name(db: AsyncSession, user_id: UUID, name: str) -> Optional[Tag]:
    result = await db.execute(select(Tag).where(Tag.owner_id == user_id, Tag.name == name))
    return result.scalar_one_or_none()


@router.get("")
async def list_tags(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's tags, most used first."""
    stmt = select(Tag).where(Tag.owner_id == user.id)

    if search:
        stmt = stmt.where(Tag.name.ilike(contains_pattern(search.strip().lower()), escape=LIKE_ESCAPE))

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    result = await db.execute(
        stmt.order_by(Tag.usage_count.desc(), Tag.name).limit(limit).offset((page - 1) * limit)
    )
    tags = [TagView.model_validate(tag) for tag in result.scalars().all()]

    return paginated(tags, page=page, limit=limit, total=total)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: TagCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Register a tag.

    Names are lowercased, so ``Music`` conflicts with an existing ``music``.
    """
    name = clean_name(request.name)

    existing = await find_tag_by_name(db, user.id, name)
    if existing:
        raise ConflictError("Tag already exists", data=TagView.model_validate(existing))

    tag = Tag(owner_id=user.id, name=name, color=request.color, usage_count=0)
    db.add(tag)
    await db.commit()

    logger.info("Tag created", tag_id=str(tag.id), name=name, user_id=str(user.id))

    return success(TagView.model_validate(tag), message="Tag created successfully")


@router.get("/{tag_id}")
async def get_tag(
    tag_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tag = await get_owned_tag(db, user.id, tag_id)
    return success(TagView.model_validate(tag))


@router.put("/{tag_id}")
async def update_tag(
    tag_id: UUID,
    request: TagUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Rename or recolour a tag. Renaming onto another tag's name is a conflict."""
    tag = await get_owned_tag(db, user.id, tag_id)

    if request.name is not None:
        name = clean_name(request.name)
        if name != tag.name:
            existing = await find_tag_by_name(db, user.id, name)
            if existing:
                raise ConflictError("Tag already exists", data=TagView.model_validate(existing))
            tag.name = name

    if request.color is not None:
        tag.color = request.color

    await db.commit()

    logger.info("Tag updated", tag_id=str(tag.id), name=tag.name)

    return success(TagView.model_validate(tag), message="Tag updated successfully")


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove a tag from the registry. Videos keep their tag strings."""
    tag = await get_owned_tag(db, user.id, tag_id)
    await db.delete(tag)
    await db.commit()

    logger.info("Tag deleted", tag_id=str(tag_id), user_id=str(user.id))

    return success(message="Tag deleted successfully")
