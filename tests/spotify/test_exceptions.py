"""Tests for the Spotify exception hierarchy."""

import pytest

from playdeck.spotify.exceptions import (
    ConfigurationError,
    NoActiveDeviceError,
    NoActiveSessionError,
    NotAuthenticatedError,
    SpotifyAuthError,
    SpotifyError,
    SpotifyParseError,
    SpotifyProviderError,
    SpotifyTransportError,
)


class TestExceptions:

    @pytest.mark.parametrize('exc_class', [
        ConfigurationError, SpotifyAuthError, NotAuthenticatedError,
        SpotifyTransportError, SpotifyParseError,
        NoActiveSessionError, NoActiveDeviceError,
    ])
    def test_all_derive_from_spotify_error(self, exc_class):
        assert issubclass(exc_class, SpotifyError)

    def test_categories_are_distinct(self):
        categories = {
            cls.category for cls in (
                ConfigurationError, SpotifyAuthError, NotAuthenticatedError,
                SpotifyTransportError, SpotifyProviderError, SpotifyParseError,
                NoActiveSessionError, NoActiveDeviceError,
            )
        }
        assert len(categories) == 8

    def test_provider_error_keeps_status_and_body(self):
        error = SpotifyProviderError(404, 'No active device found')

        assert error.status_code == 404
        assert error.body == 'No active device found'
        assert str(error) == 'Spotify error (404): No active device found'
        assert isinstance(error, SpotifyError)

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
