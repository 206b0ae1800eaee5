"""
Playdeck Services Package

Usage:
    from playdeck.services import AuthService, PlaybackService

    auth_service = AuthService(auth_manager, token_store)
    auth_service.exchange_code()

    playback = PlaybackService(http_client, token_store)
    snapshot = playback.fetch_current_song()
"""

from playdeck.services.auth_service import AuthService
from playdeck.services.playback_service import PlaybackService

__all__ = [
    "AuthService",
    "PlaybackService",
]
