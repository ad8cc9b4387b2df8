"""Tag registry helpers shared by the video routes."""

from typing import Iterable
from uuid import UUID
from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tag import Tag


async def adjust_tag_usage(
    db: AsyncSession,
    owner_id: UUID,
    added: Iterable[str] = (),
    removed: Iterable[str] = (),
):
    """Bump usage counters of the owner's registry tags matching the given names.

    Counters never drop below zero. Names without a registry entry are ignored.
    """
    added = list(added)
    removed = list(removed)

    if added:
        await db.execute(
            update(Tag)
            .where(Tag.owner_id == owner_id, Tag.name.in_(added))
            .values(usage_count=Tag.usage_count + 1)
            .execution_options(synchronize_session=False)
        )

    if removed:
        await db.execute(
            update(Tag)
            .where(Tag.owner_id == owner_id, Tag.name.in_(removed))
            .values(usage_count=case((Tag.usage_count > 0, Tag.usage_count - 1), else_=0))
            .execution_options(synchronize_session=False)
        )
