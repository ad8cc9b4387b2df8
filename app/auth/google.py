"""Google OAuth 2.0 authorization-code flow helpers."""

from typing import Optional
from urllib.parse import urlencode
import httpx

from app.config import settings
from app.errors import AuthError, UpstreamUnavailableError
from app.logging_config import logger


def build_authorization_url(state: str) -> str:
    """URL of Google's consent screen for the profile and email scopes."""
    if not settings.google_oauth_configured:
        raise UpstreamUnavailableError("Google sign-in is not configured")

    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.google_redirect_uri,
        "response_type": "code",
        "scope": "openid profile email",
        "state": state,
        "access_type": "online",
        "prompt": "select_account",
    }
    return f"{settings.google_auth_url}?{urlencode(params)}"


async def fetch_google_profile(
    code: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict:
    """Exchange an authorization code and return the user's OpenID profile.

    Args:
        code: Authorization code from the callback
        transport: Optional httpx transport (tests)

    Returns:
        Dict with at least ``sub`` and ``email``

    Raises:
        AuthError: If Google rejects the code or returns no email
    """
    if not settings.google_oauth_configured:
        raise UpstreamUnavailableError("Google sign-in is not configured")

    async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
        try:
            token_response = await client.post(
                settings.google_token_url,
                data={
                    "code": code,
                    "client_id": settings.google_client_id,
                    "client_secret": settings.google_client_secret,
                    "redirect_uri": settings.google_redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            token_response.raise_for_status()
            access_token = token_response.json()["access_token"]

            profile_response = await client.get(
                settings.google_userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            profile_response.raise_for_status()
            profile = profile_response.json()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning("Google code exchange failed", error=str(e))
            raise AuthError("Google sign-in failed")

    if not profile.get("sub") or not profile.get("email"):
        raise AuthError("Google account has no email address")

    return profile
