"""Authentication routes: email/password, token refresh and Google sign-in."""

from datetime import datetime
from typing import Literal, Optional
from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from jose import JWTError
from pydantic import EmailStr, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.crypto import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_state,
    hash_password,
    verify_password,
)
from app.auth.google import build_authorization_url, fetch_google_profile
from app.auth.middleware import get_current_user
from app.config import settings
from app.db import get_db
from app.errors import AppError, AuthError, ConflictError, ValidationError
from app.logging_config import logger
from app.models.base import utc_now
from app.models.user import User
from app.schemas import ApiModel, success

router = APIRouter()

OAUTH_STATE_SESSION_KEY = "google_oauth_state"


# Request/Response models
class RegisterRequest(ApiModel):
    """User registration request."""

    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(ApiModel):
    """User login request."""

    email: EmailStr
    password: str


class RefreshTokenRequest(ApiModel):
    """Refresh token request."""

    refresh_token: Optional[str] = None


class Preferences(ApiModel):
    theme: Literal["light", "dark", "system"] = "system"
    email_notifications: bool = True


class PreferencesUpdate(ApiModel):
    theme: Optional[Literal["light", "dark", "system"]] = None
    email_notifications: Optional[bool] = None


class ProfileUpdateRequest(ApiModel):
    """Profile update request."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    preferences: Optional[PreferencesUpdate] = None


class UserProfile(ApiModel):
    """User profile without credentials."""

    id: UUID
    email: str
    name: str
    avatar: Optional[str] = None
    preferences: Preferences
    last_login_at: Optional[datetime] = None
    created_at: datetime


class AuthPayload(ApiModel):
    """Tokens plus the signed-in user."""

    user: UserProfile
    token: str
    refresh_token: str


class TokenPair(ApiModel):
    token: str
    refresh_token: str


def issue_tokens(user: User) -> AuthPayload:
    user_id = str(user.id)
    return AuthPayload(
        user=UserProfile.model_validate(user),
        token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
    )


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user with email and password.

    Raises:
        ConflictError: If the email is already registered
    """
    if await find_user_by_email(db, request.email):
        raise ConflictError("User with this email already exists")

    user = User(
        email=request.email.lower(),
        password_hash=hash_password(request.password),
        name=request.name.strip(),
    )
    db.add(user)
    await db.commit()

    logger.info("User registered", user_id=str(user.id))

    return success(issue_tokens(user), message="User registered successfully")


@router.post("/login")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Login with email and password."""
    user = await find_user_by_email(db, request.email)

    if not user or not user.is_active or not verify_password(request.password, user.password_hash):
        logger.warning("Login failed", email=request.email)
        raise AuthError("Invalid email or password")

    user.last_login_at = utc_now()
    await db.commit()

    logger.info("User logged in", user_id=str(user.id))

    return success(issue_tokens(user), message="Login successful")


@router.post("/refresh")
async def refresh_token(
    request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange a valid refresh token for a new token pair."""
    if not request.refresh_token:
        raise ValidationError("Refresh token required")

    try:
        payload = decode_token(request.refresh_token, token_type=REFRESH_TOKEN_TYPE)
        user_id = UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise AuthError("Invalid refresh token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise AuthError("Invalid refresh token")

    pair = issue_tokens(user)
    return success(TokenPair(token=pair.token, refresh_token=pair.refresh_token))


@router.get("/me")
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user profile."""
    return success(UserProfile.model_validate(current_user))


@router.put("/profile")
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's name and/or preferences."""
    if request.name is not None:
        current_user.name = request.name.strip()

    if request.preferences is not None:
        changes = request.preferences.model_dump(by_alias=True, exclude_none=True)
        current_user.preferences = {**(current_user.preferences or {}), **changes}

    await db.commit()

    logger.info("Profile updated", user_id=str(current_user.id))

    return success(UserProfile.model_validate(current_user), message="Profile updated successfully")


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    """Logout; tokens are stateless so the client simply discards them."""
    logger.info("User logged out", user_id=str(current_user.id))
    return success(message="Logged out successfully")


@router.get("/google")
async def google_login(request: Request):
    """Redirect to Google's consent screen."""
    state = generate_state()
    request.session[OAUTH_STATE_SESSION_KEY] = state
    return RedirectResponse(build_authorization_url(state), status_code=status.HTTP_302_FOUND)


async def link_google_account(db: AsyncSession, profile: dict) -> User:
    """Find the user for a Google profile, linking by email or creating one."""
    result = await db.execute(select(User).where(User.google_id == profile["sub"]))
    user = result.scalar_one_or_none()

    if not user:
        user = await find_user_by_email(db, profile["email"])
        if user:
            user.google_id = profile["sub"]
            if not user.avatar:
                user.avatar = profile.get("picture")
        else:
            user = User(
                email=profile["email"].lower(),
                name=profile.get("name") or profile["email"].split("@")[0],
                avatar=profile.get("picture"),
                google_id=profile["sub"],
            )
            db.add(user)

    if not user.is_active:
        raise AuthError("Account is disabled")

    user.last_login_at = utc_now()
    await db.commit()
    return user


@router.get("/google/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Complete Google sign-in and hand tokens to the frontend."""
    expected_state = request.session.pop(OAUTH_STATE_SESSION_KEY, None)

    try:
        if not code or not state or state != expected_state:
            raise AuthError("Invalid OAuth state")

        profile = await fetch_google_profile(code)
        user = await link_google_account(db, profile)
    except AppError as e:
        logger.warning("Google sign-in failed", error=e.message)
        return RedirectResponse(f"{settings.frontend_url}/auth/error", status_code=status.HTTP_302_FOUND)

    tokens = issue_tokens(user)
    logger.info("User signed in with Google", user_id=str(user.id))

    query = urlencode({"token": tokens.token, "refreshToken": tokens.refresh_token})
    return RedirectResponse(f"{settings.frontend_url}/auth/callback?{query}", status_code=status.HTTP_302_FOUND)
