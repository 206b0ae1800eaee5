"""
Spotify module exceptions.

Every failure a command can produce maps onto exactly one class here.
The ``category`` attribute is the stable name handed to the UI layer.
"""

from typing import Optional


class SpotifyError(Exception):
    """Base exception for all Spotify-related errors."""

    category = "error"


class ConfigurationError(SpotifyError, ValueError):
    """Raised when client credentials are missing from configuration."""

    category = "configuration"


class SpotifyAuthError(SpotifyError):
    """Raised when the authorization flow cannot proceed."""

    category = "auth"


class NotAuthenticatedError(SpotifyAuthError):
    """Raised when a command needs a token and none is available."""

    category = "not_authenticated"


class SpotifyTransportError(SpotifyError):
    """Raised on DNS, TLS, connection or timeout failures."""

    category = "transport"


class SpotifyProviderError(SpotifyError):
    """Raised when Spotify answers with a non-2xx status.

    The raw response body is kept verbatim so callers can branch on
    Spotify's structured error codes (e.g. ``invalid_grant``).
    """

    category = "provider"

    def __init__(self, status_code: int, body: str, message: Optional[str] = None):
        super().__init__(
            message or f"Spotify error ({status_code}): {body}"
        )
        self.status_code = status_code
        self.body = body


class SpotifyParseError(SpotifyError):
    """Raised when a response is malformed or lacks a required field."""

    category = "parse"


class NoActiveSessionError(SpotifyError):
    """Raised when nothing is currently playing (HTTP 204)."""

    category = "no_active_session"


class NoActiveDeviceError(SpotifyError):
    """Raised when playback is requested but no device is available."""

    category = "no_active_device"
