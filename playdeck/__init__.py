import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config import config, validate_required_env_vars
from playdeck.callback import CallbackServer, create_callback_app
from playdeck.commands import CommandDispatcher
from playdeck.services import AuthService, PlaybackService
from playdeck.spotify import (
    SpotifyAuthManager,
    SpotifyCredentials,
    SpotifyHTTPClient,
    TokenStore,
)

logger = logging.getLogger(__name__)


@dataclass
class PlaydeckApp:
    """Everything the desktop shell talks to, wired around one token store."""

    config: Dict[str, Any]
    token_store: TokenStore
    auth_service: AuthService
    playback_service: PlaybackService
    dispatcher: CommandDispatcher
    callback_server: CallbackServer
    http_client: SpotifyHTTPClient

    def start(self) -> None:
        """Start the loopback callback listener."""
        self.callback_server.start()

    def shutdown(self) -> None:
        self.dispatcher.shutdown(wait=False)
        self.callback_server.shutdown()
        self.http_client.close()


def _config_dict(config_name: str) -> Dict[str, Any]:
    config_class = config[config_name]
    return {
        key: getattr(config_class, key)
        for key in dir(config_class)
        if key.isupper()
    }


def create_app(config_name=None, overrides: Optional[Dict[str, Any]] = None) -> PlaydeckApp:
    """
    Create and wire the application.

    The callback listener is built but not started; call ``start()``.

    Raises:
        ConfigurationError: If Spotify client credentials are missing.
        ValueError: In production, if required env vars are missing.
    """
    if config_name is None:
        config_name = os.getenv("PLAYDECK_ENV", "production")

    if config_name not in config:
        config_name = "production"

    settings = _config_dict(config_name)
    settings.update(overrides or {})

    logging.basicConfig(level=settings.get("LOG_LEVEL", "INFO"))
    logger.info("Creating app with config: %s", config_name)

    # Validate required environment variables
    try:
        validate_required_env_vars()
        logger.info("Environment validation passed")
    except ValueError as e:
        logger.error("Environment validation failed: %s", str(e))
        if config_name == "production":
            raise  # Fail fast in production
        logger.warning("Continuing with credentials from %s config", config_name)

    credentials = SpotifyCredentials.from_config(settings)
    logger.info("SPOTIFY_REDIRECT_URI: %s", credentials.redirect_uri)

    token_store = TokenStore()
    timeout = settings["REQUEST_TIMEOUT"]

    auth_service = AuthService(
        SpotifyAuthManager(credentials, timeout=timeout),
        token_store,
    )
    http_client = SpotifyHTTPClient(timeout=timeout)
    playback_service = PlaybackService(
        http_client,
        token_store,
    )
    dispatcher = CommandDispatcher(
        auth_service,
        playback_service,
        max_workers=settings["COMMAND_WORKERS"],
    )

    callback_app = create_callback_app(
        token_store,
        app_scheme=settings["APP_SCHEME"],
        app_host=settings["APP_HOST"],
        callback_path=settings["CALLBACK_PATH"],
    )
    callback_server = CallbackServer(
        callback_app,
        host=settings["CALLBACK_HOST"],
        port=settings["CALLBACK_PORT"],
    )

    return PlaydeckApp(
        config=settings,
        token_store=token_store,
        auth_service=auth_service,
        playback_service=playback_service,
        dispatcher=dispatcher,
        callback_server=callback_server,
        http_client=http_client,
    )
