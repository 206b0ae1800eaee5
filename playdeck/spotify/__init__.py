"""
Spotify integration module.

Architecture:
    - credentials.py: SpotifyCredentials (client id / secret / redirect URI)
    - auth.py: Credential, build_authorization_url, SpotifyAuthManager
    - token_store.py: TokenStore shared across threads
    - http_client.py: SpotifyHTTPClient for Web API calls
    - models.py: PlaybackSnapshot and display defaults
    - exceptions.py: Exception hierarchy

Usage:
    from playdeck.spotify import (
        SpotifyCredentials,
        SpotifyAuthManager,
        TokenStore,
    )

    credentials = SpotifyCredentials.from_env()
    auth_manager = SpotifyAuthManager(credentials)
    store = TokenStore()

    auth_url = auth_manager.get_auth_url()
    store.set_credential(auth_manager.exchange_code(code))
"""

# Credentials
from .credentials import SpotifyCredentials

# Auth
from .auth import (
    Credential,
    SpotifyAuthManager,
    build_authorization_url,
    DEFAULT_SCOPES,
)

# Token store
from .token_store import TokenStore

# HTTP
from .http_client import SpotifyHTTPClient

# Models
from .models import PlaybackSnapshot, PLACEHOLDER_IMAGE_URL

# Exceptions
from .exceptions import (
    SpotifyError,
    ConfigurationError,
    SpotifyAuthError,
    NotAuthenticatedError,
    SpotifyTransportError,
    SpotifyProviderError,
    SpotifyParseError,
    NoActiveSessionError,
    NoActiveDeviceError,
)


__all__ = [
    # Credentials
    'SpotifyCredentials',

    # Auth
    'Credential',
    'SpotifyAuthManager',
    'build_authorization_url',
    'DEFAULT_SCOPES',

    # Token store
    'TokenStore',

    # HTTP
    'SpotifyHTTPClient',

    # Models
    'PlaybackSnapshot',
    'PLACEHOLDER_IMAGE_URL',

    # Exceptions
    'SpotifyError',
    'ConfigurationError',
    'SpotifyAuthError',
    'NotAuthenticatedError',
    'SpotifyTransportError',
    'SpotifyProviderError',
    'SpotifyParseError',
    'NoActiveSessionError',
    'NoActiveDeviceError',
]
