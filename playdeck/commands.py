"""
Command dispatcher for the UI layer.

Maps command names onto the auth and playback services and runs every
invocation as an independent task on a thread pool. Results come back as
outcome envelopes:

    {"success": True, "data": ...}
    {"success": False, "message": "...", "category": "..."}
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Tuple, Type

from pydantic import BaseModel, ValidationError

from playdeck.schemas.requests import (
    AccessTokenRequest,
    BuildAuthUrlRequest,
    EnsureCredentialRequest,
    ExchangeCodeRequest,
    PlaylistRequest,
    RefreshRequest,
    SetVolumeRequest,
    StoreCredentialRequest,
)
from playdeck.services.auth_service import AuthService
from playdeck.services.playback_service import PlaybackService
from playdeck.spotify.auth import Credential
from playdeck.spotify.exceptions import SpotifyError

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

Handler = Callable[[BaseModel], Any]


def success_outcome(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def error_outcome(message: str, category: str = "error") -> Dict[str, Any]:
    """Create a standardized error outcome."""
    return {"success": False, "message": message, "category": category}


def _serialize(result: Any) -> Any:
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


def _validation_message(error: ValidationError) -> str:
    errors_list = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"])
        errors_list.append(f"{field}: {err['msg']}")
    return "; ".join(errors_list) if errors_list else "Validation failed"


class CommandDispatcher:
    """
    Runs named commands concurrently.

    No ordering is guaranteed between invocations and an issued command
    cannot be cancelled; Spotify decides the final playback state.
    """

    def __init__(
        self,
        auth_service: AuthService,
        playback_service: PlaybackService,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._auth = auth_service
        self._playback = playback_service
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="playdeck-command",
        )
        self._commands: Dict[str, Tuple[Type[BaseModel], Handler]] = self._build_registry()

    def _build_registry(self) -> Dict[str, Tuple[Type[BaseModel], Handler]]:
        auth = self._auth
        playback = self._playback

        def token_only(method: Callable) -> Tuple[Type[BaseModel], Handler]:
            return AccessTokenRequest, lambda req: method(access_token=req.access_token)

        return {
            # Authentication flow
            "build_authorization_url": (
                BuildAuthUrlRequest,
                lambda req: auth.build_authorization_url(req.scopes),
            ),
            "exchange_code": (
                ExchangeCodeRequest,
                lambda req: auth.exchange_code(req.code),
            ),
            "refresh": (
                RefreshRequest,
                lambda req: auth.refresh(req.refresh_token),
            ),
            "ensure_valid_credential": (
                EnsureCredentialRequest,
                lambda req: auth.ensure_valid_credential(),
            ),
            "store_credential": (
                StoreCredentialRequest,
                lambda req: auth.store_credential(Credential.from_dict(req.credential)),
            ),
            # Playback
            "fetch_current_song": token_only(playback.fetch_current_song),
            "play": token_only(playback.play),
            "pause": token_only(playback.pause),
            "skip_next": token_only(playback.skip_next),
            "skip_previous": token_only(playback.skip_previous),
            "toggle_shuffle": token_only(playback.toggle_shuffle),
            "restart_song": token_only(playback.restart_song),
            "set_volume": (
                SetVolumeRequest,
                lambda req: playback.set_volume(req.volume, access_token=req.access_token),
            ),
            "change_playlist": (
                PlaylistRequest,
                lambda req: playback.change_playlist(req.playlist_id, access_token=req.access_token),
            ),
            # Queries
            "get_devices": token_only(playback.get_devices),
            "get_playback_state": token_only(playback.get_playback_state),
            "fetch_playlists": token_only(playback.fetch_playlists),
            "get_user_profile": token_only(playback.get_user_profile),
            "get_playlist_image": (
                PlaylistRequest,
                lambda req: playback.get_playlist_image(req.playlist_id, access_token=req.access_token),
            ),
        }

    @property
    def command_names(self):
        return sorted(self._commands)

    def invoke(self, name: str, **kwargs) -> Future:
        """
        Schedule a command.

        Args:
            name: One of ``command_names``.
            **kwargs: Command arguments, validated against its schema.

        Returns:
            Future resolving to an outcome envelope.

        Raises:
            KeyError: Unknown command name.
        """
        if name not in self._commands:
            raise KeyError(f"Unknown command: {name}")
        return self._executor.submit(self.execute, name, **kwargs)

    def execute(self, name: str, **kwargs) -> Dict[str, Any]:
        """Run a command on the calling thread and return its outcome."""
        schema, handler = self._commands[name]

        try:
            request = schema(**kwargs)
            result = handler(request)
        except SpotifyError as e:
            logger.warning("Command %s failed (%s): %s", name, e.category, e)
            return error_outcome(str(e), e.category)
        except ValidationError as e:
            message = _validation_message(e)
            logger.warning("Invalid arguments for %s: %s", name, message)
            return error_outcome(message, "validation")
        except ValueError as e:
            logger.warning("Invalid arguments for %s: %s", name, e)
            return error_outcome(str(e), "validation")

        return success_outcome(_serialize(result))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
