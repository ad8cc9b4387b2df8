"""SQLAlchemy ORM models for MyTube."""

from app.models.base import Base
from app.models.user import User, Theme
from app.models.video import Video, VideoTag
from app.models.user_video import UserVideo
from app.models.playlist import Playlist
from app.models.note import Note
from app.models.history import History
from app.models.tag import Tag

__all__ = [
    "Base",
    "User",
    "Theme",
    "Video",
    "VideoTag",
    "UserVideo",
    "Playlist",
    "Note",
    "History",
    "Tag",
]
