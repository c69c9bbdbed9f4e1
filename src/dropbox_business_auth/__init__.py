"""
Dropbox Business authentication strategy.

Exposes the strategy (DropboxBusinessStrategy), its configuration
(StrategyConfig), the team admin resolver helpers (find_team_admin,
normalize_profile) and the error types raised during profile resolution.
"""

from .config import StrategyConfig
from .dropbox import STRATEGY_NAME, DropboxBusinessStrategy
from .errors import (
    DropboxBusinessError,
    NotFoundError,
    ParseError,
    ProfileFetchError,
    TransportError,
)
from .models import NormalizedProfile, ProfileEmail, ProfileName
from .protocol import OAuth2Transport, OAuthProvider
from .resolver import find_team_admin, iter_member_pages, normalize_profile
from .transport import AuthlibTransport

__all__ = [
    "STRATEGY_NAME",
    "DropboxBusinessStrategy",
    "StrategyConfig",
    "OAuthProvider",
    "OAuth2Transport",
    "AuthlibTransport",
    "find_team_admin",
    "iter_member_pages",
    "normalize_profile",
    "NormalizedProfile",
    "ProfileName",
    "ProfileEmail",
    "DropboxBusinessError",
    "TransportError",
    "ParseError",
    "NotFoundError",
    "ProfileFetchError",
]
