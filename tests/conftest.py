"""
Pytest configuration and shared fixtures for Playdeck tests.

Provides sample token payloads, Spotify response bodies and an isolated
token store per test.
"""

import pytest

from playdeck.spotify.auth import Credential
from playdeck.spotify.credentials import SpotifyCredentials
from playdeck.spotify.token_store import TokenStore


# =============================================================================
# Credentials and tokens
# =============================================================================

@pytest.fixture
def credentials():
    """Valid SpotifyCredentials for testing."""
    return SpotifyCredentials(
        client_id='test_client_id',
        client_secret='test_client_secret',
        redirect_uri='http://127.0.0.1:8888/callback'
    )


@pytest.fixture
def token_payload():
    """A token endpoint response body with a refresh token."""
    return {
        'access_token': 'test_access_token_12345',
        'token_type': 'Bearer',
        'expires_in': 3600,
        'refresh_token': 'test_refresh_token_67890',
        'scope': 'user-read-playback-state user-modify-playback-state',
    }


@pytest.fixture
def credential(token_payload):
    """A parsed Credential."""
    return Credential.from_dict(token_payload)


@pytest.fixture
def token_store():
    """An empty, isolated token store."""
    return TokenStore()


@pytest.fixture
def authenticated_store(token_store, credential):
    """A token store already holding a credential."""
    token_store.set_credential(credential)
    return token_store


# =============================================================================
# Spotify response bodies
# =============================================================================

@pytest.fixture
def currently_playing():
    """Sample /me/player/currently-playing body."""
    return {
        'is_playing': True,
        'progress_ms': 42000,
        'item': {
            'name': 'Song Title',
            'duration_ms': 215000,
            'artists': [{'id': 'artist123', 'name': 'Artist Name'}],
            'album': {
                'name': 'Album Name',
                'images': [
                    {'url': 'https://i.scdn.co/image/album640', 'width': 640},
                    {'url': 'https://i.scdn.co/image/album300', 'width': 300},
                ],
            },
        },
    }


@pytest.fixture
def artist():
    """Sample /artists/{id} body."""
    return {
        'id': 'artist123',
        'name': 'Artist Name',
        'images': [{'url': 'https://i.scdn.co/image/artist640', 'width': 640}],
    }


@pytest.fixture
def devices():
    """Sample /me/player/devices body."""
    return {
        'devices': [
            {'id': 'device1', 'name': 'Desktop', 'is_active': False, 'type': 'Computer'},
            {'id': 'device2', 'name': 'Phone', 'is_active': True, 'type': 'Smartphone'},
        ]
    }
