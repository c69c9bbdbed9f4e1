"""
Configuration for the Dropbox Business strategy.

StrategyConfig holds the app credentials and the provider endpoints. Any of
authorization_url, token_url, scope_separator and custom_headers left unset
(or explicitly None / empty) resolves to the Dropbox defaults below, so a
caller normally only supplies client_id, client_secret and callback_url.

StrategyConfig.from_env() is a convenience for host applications: it loads a
.env file with python-dotenv and reads the DROPBOX_* variables. The strategy
itself never touches the environment.
"""

import os
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_AUTHORIZATION_URL = "https://www.dropbox.com/oauth2/authorize"
DEFAULT_TOKEN_URL = "https://api.dropbox.com/oauth2/token"
DEFAULT_SCOPE_SEPARATOR = ","
DEFAULT_HEADERS = {"Content-Type": "application/json"}


class StrategyConfig(BaseModel):
    """Immutable strategy settings with Dropbox defaults applied."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Accepted for compatibility; the strategy always talks to API v2.
    api_version: Literal["1", "2"] = "2"
    client_id: str
    client_secret: str
    callback_url: Optional[str] = None
    authorization_url: str = DEFAULT_AUTHORIZATION_URL
    token_url: str = DEFAULT_TOKEN_URL
    scope: Tuple[str, ...] = ()
    scope_separator: str = DEFAULT_SCOPE_SEPARATOR
    custom_headers: Mapping[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_HEADERS), validate_default=True
    )

    @field_validator(
        "authorization_url", "token_url", "scope_separator", "custom_headers", mode="before"
    )
    @classmethod
    def _default_when_unset(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "":
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    @field_validator("custom_headers", mode="after")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_validator("scope", mode="before")
    @classmethod
    def _split_scope_string(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(value.split())
        return value

    @property
    def scope_param(self) -> Optional[str]:
        """Scopes joined with scope_separator, or None when no scope is configured."""
        if not self.scope:
            return None
        return self.scope_separator.join(self.scope)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "StrategyConfig":
        """
        Build a config from DROPBOX_* environment variables.

        Values from env_file (or a .env found by python-dotenv) are loaded first
        without overriding variables already set in the process environment.
        """
        load_dotenv(env_file)
        return cls(
            api_version=os.getenv("DROPBOX_API_VERSION") or "2",
            client_id=os.getenv("DROPBOX_CLIENT_ID"),
            client_secret=os.getenv("DROPBOX_CLIENT_SECRET"),
            callback_url=os.getenv("DROPBOX_CALLBACK_URL"),
            authorization_url=os.getenv("DROPBOX_AUTHORIZATION_URL"),
            token_url=os.getenv("DROPBOX_TOKEN_URL"),
            scope=os.getenv("DROPBOX_SCOPE"),
            scope_separator=os.getenv("DROPBOX_SCOPE_SEPARATOR"),
        )
