"""
Dropbox Business OAuth strategy.

Uses Authlib for the OAuth2 authorization-code flow and the Dropbox v2 team
API to resolve the team administrator's profile. The verify callback receives
(access_token, refresh_token, profile) and returns the application's user.
"""

import inspect
import logging
from typing import Any, Callable, Optional

from authlib.integrations.starlette_client import OAuth

from dropbox_business_auth.config import StrategyConfig
from dropbox_business_auth.errors import (
    NotFoundError,
    ParseError,
    ProfileFetchError,
    TransportError,
)
from dropbox_business_auth.models import NormalizedProfile
from dropbox_business_auth.protocol import OAuth2Transport, OAuthProvider
from dropbox_business_auth.resolver import PROVIDER, find_team_admin, normalize_profile
from dropbox_business_auth.transport import AuthlibTransport

logger = logging.getLogger(__name__)

STRATEGY_NAME = "dropbox-business"

VerifyCallback = Callable[[str, Optional[str], NormalizedProfile], Any]


class DropboxBusinessStrategy(OAuthProvider):
    """OAuth provider that logs in as the admin of a Dropbox Business team."""

    name: str = STRATEGY_NAME

    def __init__(
        self,
        config: StrategyConfig,
        verify: VerifyCallback,
        *,
        oauth: Optional[OAuth] = None,
        transport: Optional[OAuth2Transport] = None,
    ):
        """Register the Authlib client for this strategy; no network calls are made here."""
        self.name = STRATEGY_NAME
        self.config = config
        self.verify = verify

        if config.api_version != "2":
            logger.warning(
                "Ignoring requested Dropbox API version; only v2 is supported",
                extra={"strategy": self.name, "requested_api_version": config.api_version},
            )
        self.api_version = "2"

        client_kwargs = {}
        if config.scope_param:
            client_kwargs["scope"] = config.scope_param

        self.oauth = oauth if oauth is not None else OAuth()
        self.client = self.oauth.register(
            name=self.name,
            client_id=config.client_id,
            client_secret=config.client_secret,
            authorize_url=config.authorization_url,
            access_token_url=config.token_url,
            client_kwargs=client_kwargs,
        )
        self.transport = transport or AuthlibTransport(self.client, config.custom_headers)

    async def login_redirect(self, request, redirect_uri: Optional[str] = None):
        """Return RedirectResponse to Dropbox."""
        return await self.client.authorize_redirect(
            request, redirect_uri or self.config.callback_url
        )

    async def handle_callback(self, request) -> tuple[Any, NormalizedProfile]:
        """Exchange the code, resolve the admin profile, run verify. Return (user, profile)."""
        token = await self.client.authorize_access_token(request)
        profile = await self.user_profile(token["access_token"])
        user = await self._run_verify(token["access_token"], token.get("refresh_token"), profile)
        return user, profile

    async def verify_tokens(
        self, access_token: str, refresh_token: Optional[str] = None
    ) -> Any:
        """Resolve the profile for already-issued tokens and pass everything to verify."""
        profile = await self.user_profile(access_token)
        return await self._run_verify(access_token, refresh_token, profile)

    async def user_profile(self, access_token: str) -> NormalizedProfile:
        """
        Retrieve the team admin's profile from Dropbox Business.

        Returns a NormalizedProfile with provider "dropbox", the admin's account
        id, display name, structured name and email. Any transport, parse or
        lookup failure is raised as ProfileFetchError.
        """
        logger.info(
            "Resolving Dropbox Business team admin profile",
            extra={"provider": PROVIDER, "strategy": self.name},
        )
        try:
            raw = await find_team_admin(self.transport, access_token)
            return normalize_profile(raw)
        except (TransportError, ParseError, NotFoundError) as exc:
            logger.warning(
                "Failed to resolve team admin profile",
                extra={"provider": PROVIDER, "strategy": self.name, "error": str(exc)},
            )
            raise ProfileFetchError("failed to fetch user profile", exc) from exc

    async def _run_verify(
        self, access_token: str, refresh_token: Optional[str], profile: NormalizedProfile
    ) -> Any:
        result = self.verify(access_token, refresh_token, profile)
        if inspect.isawaitable(result):
            result = await result
        return result
