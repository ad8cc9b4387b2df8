"""Cryptographic utilities for password hashing and token generation."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
from app.logging_config import logger

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Argon2id password hashing context
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=settings.password_hash_time_cost,
    argon2__memory_cost=settings.password_hash_memory_cost,
    argon2__parallelism=settings.password_hash_parallelism,
    argon2__type="ID",
)


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash.

    Accounts created through Google sign-in have no hash and never match.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.warning("Password verification failed", error=str(e))
        return False


def generate_state(length: int = 32) -> str:
    """Generate a URL-safe random value (OAuth ``state``)."""
    return secrets.token_urlsafe(length)


def _create_token(user_id: str, token_type: str, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": user_id,
        "exp": now + expires_delta,
        "iat": now,
        "iss": settings.jwt_issuer,
        "type": token_type,
        # Unique per token so two pairs issued in the same second differ
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a short-lived JWT access token.

    Args:
        user_id: User UUID as string
        expires_delta: Optional custom expiration delta

    Returns:
        JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)
    return _create_token(user_id, ACCESS_TOKEN_TYPE, settings.jwt_secret_key, expires_delta)


def create_refresh_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a longer-lived JWT refresh token signed with its own secret."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.jwt_refresh_token_expire_days)
    return _create_token(user_id, REFRESH_TOKEN_TYPE, settings.jwt_refresh_secret_key, expires_delta)


def decode_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> dict:
    """Decode and validate a JWT of the given type.

    Raises:
        JWTError: If the token is invalid, expired or of another type
    """
    secret = settings.jwt_secret_key if token_type == ACCESS_TOKEN_TYPE else settings.jwt_refresh_secret_key
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        logger.warning("Token decode failed", error=str(e), token_type=token_type)
        raise

    if payload.get("type") != token_type:
        raise JWTError(f"Expected {token_type} token")
    return payload
