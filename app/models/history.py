"""Watch history model."""

from uuid import uuid4
from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, Index, Uuid
from app.models.base import Base, utc_now


class History(Base):
    """One viewing session of a video."""

    __tablename__ = "history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    watched_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    duration = Column(Integer, nullable=False)  # seconds watched
    position = Column(Integer, nullable=False, default=0)  # last position in seconds
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_history_user_watched", "user_id", "watched_at"),
        Index("idx_history_video_watched", "video_id", "watched_at"),
    )

    def __repr__(self):
        return f"<History(id={self.id}, video_id={self.video_id})>"
