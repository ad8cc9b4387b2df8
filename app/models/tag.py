"""Tag registry model."""

from uuid import uuid4
from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey, Index, Uuid
from app.models.base import Base, utc_now

DEFAULT_TAG_COLOR = "#3B82F6"


class Tag(Base):
    """A user's tag with a display colour and a usage counter.

    Names are stored lowercase, so uniqueness per owner is case-insensitive.
    """

    __tablename__ = "tags"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    color = Column(String(16), nullable=False, default=DEFAULT_TAG_COLOR)
    usage_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("idx_tags_owner_name", "owner_id", "name", unique=True),
    )

    def __repr__(self):
        return f"<Tag(id={self.id}, name={self.name})>"
