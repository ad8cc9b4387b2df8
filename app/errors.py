"""Application error taxonomy.

Route handlers raise these; the exception handlers registered in
``app.main`` translate them into the JSON envelope.
"""

from typing import Any, Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP status.

    Args:
        message: Human-readable error shown to the caller
        data: Optional payload returned alongside the error
        detail: Internal detail, only exposed in development mode
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        data: Any = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.data = data
        self.detail = detail


class ValidationError(AppError):
    """Missing or malformed required field."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    """Resource absent or owned by somebody else."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Uniqueness violation; ``data`` carries the existing record."""

    status_code = status.HTTP_409_CONFLICT


class UpstreamUnavailableError(AppError):
    """Third-party service not configured or failing."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
