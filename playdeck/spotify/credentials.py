"""
Spotify credentials management.

Provides a frozen dataclass for the OAuth client identity, built from the
application config or the environment.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class SpotifyCredentials:
    """
    Immutable container for Spotify OAuth client credentials.

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        redirect_uri: The loopback callback URL registered with Spotify.
            Must match byte-for-byte between the authorization URL and
            the code exchange.

    Example:
        credentials = SpotifyCredentials(
            client_id='your_client_id',
            client_secret='your_client_secret',
            redirect_uri='http://127.0.0.1:8888/callback'
        )
    """

    client_id: str
    client_secret: str
    redirect_uri: str

    def __post_init__(self):
        """Validate credentials on creation."""
        if not self.client_id:
            raise ConfigurationError("client_id is required")
        if not self.client_secret:
            raise ConfigurationError("client_secret is required")
        if not self.redirect_uri:
            raise ConfigurationError("redirect_uri is required")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'SpotifyCredentials':
        """
        Create credentials from a config mapping (or config object dict).

        Raises:
            ConfigurationError: If required config keys are missing.
        """
        return cls(
            client_id=config.get('SPOTIFY_CLIENT_ID') or '',
            client_secret=config.get('SPOTIFY_CLIENT_SECRET') or '',
            redirect_uri=config.get('SPOTIFY_REDIRECT_URI') or '',
        )

    @classmethod
    def from_env(cls) -> 'SpotifyCredentials':
        """
        Create credentials from environment variables.

        Raises:
            ConfigurationError: If required environment variables are missing.
        """
        return cls(
            client_id=os.getenv('SPOTIFY_CLIENT_ID', ''),
            client_secret=os.getenv('SPOTIFY_CLIENT_SECRET', ''),
            redirect_uri=os.getenv('SPOTIFY_REDIRECT_URI', ''),
        )

    def __repr__(self) -> str:
        return (
            f"SpotifyCredentials(client_id={self.client_id!r}, "
            f"client_secret='***', redirect_uri={self.redirect_uri!r})"
        )
