"""
Errors raised while resolving the Dropbox Business admin profile.

TransportError, ParseError and NotFoundError describe what went wrong during a
single profile fetch. DropboxBusinessStrategy.user_profile surfaces all three as
one ProfileFetchError, keeping the underlying error as the cause.
"""


class DropboxBusinessError(Exception):
    """Base class for errors raised by this package."""


class TransportError(DropboxBusinessError):
    """The HTTP call to the provider failed (network error, non-2xx status, missing token)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(DropboxBusinessError):
    """A response body was not valid JSON or lacked the fields we map from."""


class NotFoundError(DropboxBusinessError):
    """Pagination ended without a member carrying the team_admin role."""


class ProfileFetchError(DropboxBusinessError):
    """Profile resolution failed; ``cause`` holds the underlying error."""

    def __init__(self, message: str, cause: Exception):
        super().__init__(message)
        self.cause = cause
