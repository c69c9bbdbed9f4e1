"""
OAuth2Transport backed by an Authlib async OAuth2 client.

The Authlib app (registered on a starlette_client.OAuth registry) owns the
generic OAuth2 mechanics; this wrapper only sends bearer-authenticated API
calls through it and turns httpx / Authlib failures into TransportError.
"""

import logging
from typing import Mapping, Optional

import httpx
from authlib.integrations.starlette_client import OAuthError

from dropbox_business_auth.errors import TransportError
from dropbox_business_auth.resolver import PROVIDER

logger = logging.getLogger(__name__)


class AuthlibTransport:
    """Send provider API requests through an Authlib app with the configured headers."""

    def __init__(self, app, custom_headers: Optional[Mapping[str, str]] = None):
        self.app = app
        self.custom_headers = dict(custom_headers or {})

    def build_auth_header(self, access_token: str) -> str:
        """Return the Bearer Authorization header value for access_token."""
        return f"Bearer {access_token}"

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str],
        access_token: str,
    ) -> str:
        """Send the request through the Authlib app; raise TransportError on failure."""
        # Per-call headers win over the configured custom headers
        merged = {**self.custom_headers, **headers}
        token = {"access_token": access_token, "token_type": "Bearer"}

        try:
            resp = await self.app.request(method, url, token=token, headers=merged, content=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning(
                "Dropbox API returned non-2xx",
                extra={"provider": PROVIDER, "endpoint": url, "status_code": status_code},
            )
            raise TransportError(
                f"{method} {url} failed with status {status_code}", status_code=status_code
            ) from exc
        except (httpx.HTTPError, OAuthError) as exc:
            logger.warning(
                "Dropbox API request failed",
                extra={"provider": PROVIDER, "endpoint": url, "error": str(exc)},
            )
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        return resp.text
