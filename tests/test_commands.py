"""
Tests for the command dispatcher.

Services are mocked; these tests check argument validation, the outcome
envelopes and concurrent scheduling.
"""

import threading

import pytest
from unittest.mock import Mock

from playdeck.commands import CommandDispatcher, error_outcome, success_outcome
from playdeck.services import AuthService, PlaybackService
from playdeck.spotify.exceptions import (
    NoActiveDeviceError,
    NoActiveSessionError,
    NotAuthenticatedError,
    SpotifyParseError,
    SpotifyProviderError,
    SpotifyTransportError,
)
from playdeck.spotify.models import PlaybackSnapshot


@pytest.fixture
def auth_service():
    return Mock(spec=AuthService)


@pytest.fixture
def playback_service():
    return Mock(spec=PlaybackService)


@pytest.fixture
def dispatcher(auth_service, playback_service):
    dispatcher = CommandDispatcher(auth_service, playback_service, max_workers=4)
    yield dispatcher
    dispatcher.shutdown()


class TestOutcomeHelpers:
    """Tests for the envelope helpers."""

    def test_success_outcome(self):
        assert success_outcome(True) == {'success': True, 'data': True}

    def test_error_outcome(self):
        assert error_outcome('boom', 'transport') == {
            'success': False,
            'message': 'boom',
            'category': 'transport',
        }

    def test_error_outcome_default_category(self):
        assert error_outcome('boom')['category'] == 'error'


class TestRegistry:
    """Tests for command registration."""

    def test_all_commands_registered(self, dispatcher):
        assert dispatcher.command_names == sorted([
            'build_authorization_url', 'exchange_code', 'refresh', 'store_credential',
            'ensure_valid_credential',
            'fetch_current_song', 'play', 'pause', 'skip_next', 'skip_previous',
            'toggle_shuffle', 'restart_song', 'set_volume', 'change_playlist',
            'get_devices', 'get_playback_state', 'fetch_playlists',
            'get_user_profile', 'get_playlist_image',
        ])

    def test_unknown_command_raises_immediately(self, dispatcher):
        with pytest.raises(KeyError):
            dispatcher.invoke('rewind')


class TestExecute:
    """Tests for execute and the outcome it returns."""

    def test_boolean_result(self, dispatcher, playback_service):
        playback_service.pause.return_value = True

        assert dispatcher.execute('pause') == {'success': True, 'data': True}
        playback_service.pause.assert_called_once_with(access_token=None)

    def test_access_token_is_passed_through(self, dispatcher, playback_service):
        playback_service.skip_next.return_value = True

        dispatcher.execute('skip_next', access_token='explicit')

        playback_service.skip_next.assert_called_once_with(access_token='explicit')

    def test_snapshot_is_serialized(self, dispatcher, playback_service):
        playback_service.fetch_current_song.return_value = PlaybackSnapshot(
            title='Song', artist='Artist',
            album_image_url='https://a', artist_image_url='https://b',
            progress_ms=1, duration_ms=2,
        )

        outcome = dispatcher.execute('fetch_current_song')

        assert outcome['success'] is True
        assert outcome['data'] == {
            'title': 'Song',
            'artist': 'Artist',
            'album_image_url': 'https://a',
            'artist_image_url': 'https://b',
            'progress_ms': 1,
            'duration_ms': 2,
        }

    def test_credential_is_serialized(self, dispatcher, auth_service, credential):
        auth_service.exchange_code.return_value = credential

        outcome = dispatcher.execute('exchange_code', code='abc')

        auth_service.exchange_code.assert_called_once_with('abc')
        assert outcome['data']['access_token'] == credential.access_token

    def test_ensure_valid_credential(self, dispatcher, auth_service, credential):
        auth_service.ensure_valid_credential.return_value = credential

        outcome = dispatcher.execute('ensure_valid_credential')

        assert outcome['success'] is True
        assert outcome['data']['access_token'] == credential.access_token
        assert outcome['data']['expires_at'] == credential.expires_at

    def test_ensure_valid_credential_when_logged_out(self, dispatcher, auth_service):
        auth_service.ensure_valid_credential.side_effect = NotAuthenticatedError(
            'Not authenticated with Spotify.'
        )

        outcome = dispatcher.execute('ensure_valid_credential')

        assert outcome == error_outcome('Not authenticated with Spotify.', 'not_authenticated')

    def test_ensure_valid_credential_takes_no_arguments(self, dispatcher, auth_service):
        outcome = dispatcher.execute('ensure_valid_credential', code='x')

        assert outcome['category'] == 'validation'
        auth_service.ensure_valid_credential.assert_not_called()

    def test_store_credential_parses_envelope(self, dispatcher, auth_service, token_payload):
        outcome = dispatcher.execute('store_credential', credential=token_payload)

        assert outcome == {'success': True, 'data': None}
        stored = auth_service.store_credential.call_args.args[0]
        assert stored.access_token == token_payload['access_token']

    def test_store_credential_rejects_bad_envelope(self, dispatcher, auth_service):
        outcome = dispatcher.execute('store_credential', credential={'token_type': 'Bearer'})

        assert outcome['success'] is False
        assert outcome['category'] == 'parse'
        auth_service.store_credential.assert_not_called()

    def test_set_volume(self, dispatcher, playback_service):
        playback_service.set_volume.return_value = True

        dispatcher.execute('set_volume', volume=30)

        playback_service.set_volume.assert_called_once_with(30, access_token=None)

    def test_change_playlist_strips_id(self, dispatcher, playback_service):
        playback_service.change_playlist.return_value = True

        dispatcher.execute('change_playlist', playlist_id='  p1  ')

        playback_service.change_playlist.assert_called_once_with('p1', access_token=None)

    def test_build_authorization_url_drops_blank_scopes(self, dispatcher, auth_service):
        auth_service.build_authorization_url.return_value = 'https://accounts.spotify.com/authorize'

        dispatcher.execute('build_authorization_url', scopes=['a', ' '])

        auth_service.build_authorization_url.assert_called_once_with(['a'])

    @pytest.mark.parametrize('error, category', [
        (NotAuthenticatedError('Not authenticated'), 'not_authenticated'),
        (NoActiveSessionError('Nothing playing'), 'no_active_session'),
        (NoActiveDeviceError('No device'), 'no_active_device'),
        (SpotifyTransportError('timed out'), 'transport'),
        (SpotifyParseError('bad json'), 'parse'),
        (SpotifyProviderError(403, 'Premium required'), 'provider'),
    ])
    def test_errors_become_envelopes(self, dispatcher, playback_service, error, category):
        playback_service.play.side_effect = error

        outcome = dispatcher.execute('play')

        assert outcome == {
            'success': False,
            'message': str(error),
            'category': category,
        }

    def test_provider_body_reaches_message(self, dispatcher, playback_service):
        playback_service.play.side_effect = SpotifyProviderError(
            403, '{"error":{"status":403,"message":"Player command failed: Premium required"}}'
        )

        outcome = dispatcher.execute('play')

        assert 'Premium required' in outcome['message']

    @pytest.mark.parametrize('kwargs', [
        {'volume': 101},
        {'volume': -1},
        {},
        {'volume': 50, 'unexpected': 1},
    ])
    def test_invalid_volume_arguments(self, dispatcher, playback_service, kwargs):
        outcome = dispatcher.execute('set_volume', **kwargs)

        assert outcome['success'] is False
        assert outcome['category'] == 'validation'
        playback_service.set_volume.assert_not_called()

    def test_service_value_error_is_validation(self, dispatcher, playback_service):
        playback_service.set_volume.side_effect = ValueError('Volume must be an integer')

        outcome = dispatcher.execute('set_volume', volume=10)

        assert outcome == error_outcome('Volume must be an integer', 'validation')

    def test_empty_playlist_id(self, dispatcher, playback_service):
        outcome = dispatcher.execute('change_playlist', playlist_id='   ')

        assert outcome['category'] == 'validation'
        assert 'playlist_id' in outcome['message']


class TestInvoke:
    """Tests for concurrent scheduling."""

    def test_invoke_returns_future_with_outcome(self, dispatcher, playback_service):
        playback_service.toggle_shuffle.return_value = True

        future = dispatcher.invoke('toggle_shuffle')

        assert future.result(timeout=5) == {'success': True, 'data': True}

    def test_commands_run_concurrently(self, dispatcher, playback_service):
        barrier = threading.Barrier(2, timeout=5)

        def wait_for_other():
            barrier.wait()
            return True

        playback_service.pause.side_effect = lambda access_token=None: wait_for_other()
        playback_service.skip_next.side_effect = lambda access_token=None: wait_for_other()

        first = dispatcher.invoke('pause')
        second = dispatcher.invoke('skip_next')

        assert first.result(timeout=5)['success'] is True
        assert second.result(timeout=5)['success'] is True

    def test_failure_does_not_affect_other_commands(self, dispatcher, playback_service):
        playback_service.play.side_effect = SpotifyTransportError('timed out')
        playback_service.pause.return_value = True

        failed = dispatcher.invoke('play')
        ok = dispatcher.invoke('pause')

        assert failed.result(timeout=5)['category'] == 'transport'
        assert ok.result(timeout=5)['success'] is True
