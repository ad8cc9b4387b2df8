"""User model."""

import enum
from uuid import uuid4
from sqlalchemy import Column, String, Boolean, JSON, TIMESTAMP, Uuid
from app.models.base import Base, utc_now


class Theme(str, enum.Enum):
    """UI theme preference."""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


DEFAULT_PREFERENCES = {
    "theme": Theme.SYSTEM.value,
    "emailNotifications": True,
}


class User(Base):
    """User account model.

    A password hash is required unless the account was created through
    Google sign-in, in which case ``google_id`` is set instead.
    """

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    name = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=True)
    google_id = Column(String(255), nullable=True, unique=True, index=True)
    preferences = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_PREFERENCES))
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(TIMESTAMP(timezone=True), nullable=True, default=utc_now)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
