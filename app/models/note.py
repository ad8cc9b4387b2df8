"""Note model."""

from uuid import uuid4
from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Index, Uuid
from app.models.base import Base, utc_now


class Note(Base):
    """Timestamped annotation on a video."""

    __tablename__ = "notes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(Integer, nullable=True)  # seconds into the video
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("idx_notes_user_created", "user_id", "created_at"),
        Index("idx_notes_user_video", "user_id", "video_id"),
    )

    def __repr__(self):
        return f"<Note(id={self.id}, video_id={self.video_id})>"
