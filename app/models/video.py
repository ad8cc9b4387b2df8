"""Video catalog models."""

from uuid import uuid4
from sqlalchemy import Column, String, Text, BigInteger, Integer, TIMESTAMP, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from app.models.base import Base, utc_now


class Video(Base):
    """A YouTube video saved by one user.

    ``duration`` keeps the ISO-8601 string returned by the YouTube API
    (e.g. ``PT4M13S``).
    """

    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    youtube_id = Column(String(32), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail = Column(String(512), nullable=False)
    duration = Column(String(32), nullable=False)
    published_at = Column(TIMESTAMP(timezone=True), nullable=True)
    channel_title = Column(String(255), nullable=False)
    view_count = Column(BigInteger, nullable=False, default=0)
    like_count = Column(BigInteger, nullable=False, default=0)
    added_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    tag_links = relationship(
        "VideoTag",
        back_populates="video",
        cascade="all, delete-orphan",
        order_by="VideoTag.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_videos_owner_youtube_id", "added_by", "youtube_id", unique=True),
    )

    @property
    def tags(self) -> list[str]:
        return [link.name for link in self.tag_links]

    def set_tags(self, names: list[str]):
        """Replace the video's tags, keeping the given order."""
        existing = {link.name: link for link in self.tag_links}
        links = []
        for position, name in enumerate(names):
            link = existing.get(name) or VideoTag(name=name)
            link.position = position
            links.append(link)
        self.tag_links = links

    def __repr__(self):
        return f"<Video(id={self.id}, youtube_id={self.youtube_id})>"


class VideoTag(Base):
    """Free-form tag string attached to a video (matched to the tag registry by name)."""

    __tablename__ = "video_tags"

    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)

    video = relationship("Video", back_populates="tag_links")


def normalize_tags(tags) -> list[str]:
    """Lowercase, trim and deduplicate tag names, preserving order."""
    normalized = []
    for tag in tags or []:
        name = str(tag).strip().lower()
        if name and name not in normalized:
            normalized.append(name)
    return normalized
