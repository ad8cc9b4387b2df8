"""Playlist model."""

from uuid import uuid4
from sqlalchemy import Column, String, Text, JSON, TIMESTAMP, ForeignKey, Uuid
from app.models.base import Base, utc_now


class Playlist(Base):
    """Ordered collection of the owner's videos.

    ``video_ids`` holds video ids as strings; it never contains the same id twice.
    """

    __tablename__ = "playlists"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    video_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now, index=True)

    def __repr__(self):
        return f"<Playlist(id={self.id}, name={self.name})>"
