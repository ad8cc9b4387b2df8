"""Per-user interaction overlay on saved videos."""

from uuid import uuid4
from sqlalchemy import Column, Boolean, Integer, TIMESTAMP, ForeignKey, Index, Uuid
from app.models.base import Base, utc_now


class UserVideo(Base):
    """Liked/pinned/watchlist flags and watch tracking for one (user, video) pair.

    Rows are created lazily on the first interaction.
    """

    __tablename__ = "user_videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    is_liked = Column(Boolean, nullable=False, default=False)
    is_pinned = Column(Boolean, nullable=False, default=False)
    is_in_watchlist = Column(Boolean, nullable=False, default=False)
    watch_count = Column(Integer, nullable=False, default=0)
    last_watched_at = Column(TIMESTAMP(timezone=True), nullable=True)
    liked_at = Column(TIMESTAMP(timezone=True), nullable=True)
    pinned_at = Column(TIMESTAMP(timezone=True), nullable=True)
    added_to_watchlist_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("idx_user_videos_user_video", "user_id", "video_id", unique=True),
        Index("idx_user_videos_user_liked", "user_id", "is_liked"),
        Index("idx_user_videos_user_pinned", "user_id", "is_pinned"),
        Index("idx_user_videos_user_watchlist", "user_id", "is_in_watchlist"),
    )

    def __repr__(self):
        return f"<UserVideo(user_id={self.user_id}, video_id={self.video_id})>"
