"""
OAuth2 for Gmail SMTP: exchange the configured refresh token for a short-lived
access token and build the SASL XOAUTH2 initial response.

Tokens are fetched per session and never cached.
"""

import base64
import logging
from typing import Optional

import httpx

from gmail_mcp.config import Settings
from gmail_mcp.errors import AuthError, TransportError

logger = logging.getLogger(__name__)

TOKEN_TIMEOUT_SECONDS = 30.0
NO_TOKEN_MESSAGE = "No access_token in OAuth response"


async def refresh_access_token(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Exchange GMAIL_OAUTH_REFRESH_TOKEN for an access token."""
    data = {
        "client_id": settings.gmail_oauth_client_id,
        "client_secret": settings.gmail_oauth_client_secret,
        "refresh_token": settings.gmail_oauth_refresh_token,
        "grant_type": "refresh_token",
    }
    headers = {"Content-Type": "application/x-www-form-urlencoded"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=TOKEN_TIMEOUT_SECONDS) as own_client:
                r = await own_client.post(settings.gmail_oauth_token_uri, data=data, headers=headers)
        else:
            r = await client.post(settings.gmail_oauth_token_uri, data=data, headers=headers)
        r.raise_for_status()
        payload = r.json()
    except httpx.HTTPStatusError as e:
        logger.warning("OAuth token refresh rejected: HTTP %d", e.response.status_code)
        raise AuthError(f"OAuth token refresh failed: {e.response.text}") from e
    except httpx.HTTPError as e:
        raise TransportError(f"OAuth token refresh failed: {e}") from e
    except ValueError as e:
        raise AuthError(NO_TOKEN_MESSAGE) from e

    if not isinstance(payload, dict):
        raise AuthError(NO_TOKEN_MESSAGE)

    token = payload.get("access_token")
    if not token:
        raise AuthError(payload.get("error_description") or payload.get("error") or NO_TOKEN_MESSAGE)
    return token


def xoauth2_string(user: str, access_token: str) -> str:
    """Base64 SASL XOAUTH2 initial client response."""
    raw = f"user={user}\x01auth=Bearer {access_token}\x01\x01"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")
