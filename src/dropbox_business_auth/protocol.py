"""
Protocols for the strategy and for the OAuth2 client it is composed with.

OAuthProvider is what a host web app drives: redirect to the IdP, then handle
the callback. OAuth2Transport is the slice of a generic OAuth2 client the admin
profile resolver needs (build an Authorization header, send an authenticated
request). DropboxBusinessStrategy implements the first and holds an instance
of the second.
"""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class OAuthProvider(Protocol):
    """Protocol for an OAuth provider strategy (e.g. Dropbox Business)."""

    name: str

    async def login_redirect(self, request, redirect_uri: str):
        """Redirect the user to the identity provider login page."""
        ...

    async def handle_callback(self, request) -> tuple[Any, Any]:
        """Handle the OAuth callback: exchange code for token, return (user, profile)."""
        ...


@runtime_checkable
class OAuth2Transport(Protocol):
    """Authenticated HTTP access to the provider API."""

    def build_auth_header(self, access_token: str) -> str:
        """Return the Authorization header value for access_token."""
        ...

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str],
        access_token: str,
    ) -> str:
        """Send the request and return the raw response body; raise TransportError on failure."""
        ...
