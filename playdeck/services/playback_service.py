"""
Playback command service.

One method per user action. Each obtains a bearer token (explicitly passed
or copied out of the token store), calls the Spotify Web API, and either
returns a typed result or raises one of the playdeck.spotify exceptions.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from playdeck.spotify.exceptions import (
    NoActiveDeviceError,
    NoActiveSessionError,
    NotAuthenticatedError,
    SpotifyParseError,
)
from playdeck.spotify.http_client import SpotifyHTTPClient
from playdeck.spotify.models import (
    PLACEHOLDER_IMAGE_URL,
    UNKNOWN_ARTIST,
    UNKNOWN_TITLE,
    PlaybackSnapshot,
)
from playdeck.spotify.token_store import TokenStore

logger = logging.getLogger(__name__)

PLAYLISTS_PAGE_SIZE = 50


def _first_image_url(images: Any) -> str:
    """Return the first image URL in a Spotify image list, or the placeholder."""
    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, dict) and first.get("url"):
            return first["url"]
    return PLACEHOLDER_IMAGE_URL


def _require_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SpotifyParseError(f"Unexpected {what} response: {data!r}")
    return data


class PlaybackService:
    """
    Command façade over the Spotify playback and catalog API.

    Every command accepts an optional ``access_token``; when it is omitted
    the current token is copied from the store. With neither, the command
    fails with NotAuthenticatedError before any request is made.
    """

    def __init__(self, http_client: SpotifyHTTPClient, token_store: TokenStore):
        self._http = http_client
        self._token_store = token_store

    def _resolve_token(self, access_token: Optional[str]) -> str:
        if access_token:
            return access_token
        credential = self._token_store.get_credential()
        if credential is None or not credential.access_token:
            raise NotAuthenticatedError("Not authenticated with Spotify.")
        return credential.access_token

    # =========================================================================
    # Now playing
    # =========================================================================

    def fetch_current_song(self, access_token: Optional[str] = None) -> PlaybackSnapshot:
        """
        Fetch the current track and its artist's image.

        Two sequential calls: currently-playing, then the artist resource.
        If the second call fails the whole command fails; no partial
        snapshot is returned.

        Raises:
            NoActiveSessionError: Nothing is playing (HTTP 204).
            SpotifyParseError: The item has no artist id.
        """
        token = self._resolve_token(access_token)

        data = self._http.get("/me/player/currently-playing", token)
        if data is None:
            raise NoActiveSessionError("Nothing is currently playing.")
        data = _require_dict(data, "currently-playing")

        item = data.get("item")
        if not isinstance(item, dict):
            raise SpotifyParseError("Currently playing response has no item")

        artists = item.get("artists")
        first_artist = artists[0] if isinstance(artists, list) and artists else {}
        if not isinstance(first_artist, dict) or not first_artist.get("id"):
            raise SpotifyParseError("Currently playing item has no artist id")
        artist_id = first_artist["id"]

        album = item.get("album") or {}
        album_image_url = _first_image_url(album.get("images"))

        artist = self._http.get(f"/artists/{quote(artist_id, safe='')}", token) or {}
        artist_image_url = _first_image_url(_require_dict(artist, "artist").get("images"))

        snapshot = PlaybackSnapshot(
            title=item.get("name") or UNKNOWN_TITLE,
            artist=first_artist.get("name") or UNKNOWN_ARTIST,
            album_image_url=album_image_url,
            artist_image_url=artist_image_url,
            progress_ms=data.get("progress_ms") or 0,
            duration_ms=item.get("duration_ms") or 0,
        )
        logger.debug("Now playing: %s - %s", snapshot.artist, snapshot.title)
        return snapshot

    # =========================================================================
    # Transport controls
    # =========================================================================

    def play(self, access_token: Optional[str] = None) -> bool:
        """
        Resume playback on the first available device.

        Raises:
            NoActiveDeviceError: The device list is empty; nothing is sent.
        """
        token = self._resolve_token(access_token)

        devices = self._list_devices(token)
        if not devices:
            raise NoActiveDeviceError(
                "No active device found. Open Spotify on a device and try again."
            )

        device = _require_dict(devices[0], "device")
        device_id = device.get("id")
        if not device_id:
            raise SpotifyParseError(f"Device has no id: {device!r}")

        self._http.put("/me/player/play", token, params={"device_id": device_id})
        logger.info("Playback started on %s", device.get("name", device_id))
        return True

    def pause(self, access_token: Optional[str] = None) -> bool:
        token = self._resolve_token(access_token)
        self._http.put("/me/player/pause", token)
        return True

    def skip_next(self, access_token: Optional[str] = None) -> bool:
        token = self._resolve_token(access_token)
        self._http.post("/me/player/next", token)
        return True

    def skip_previous(self, access_token: Optional[str] = None) -> bool:
        token = self._resolve_token(access_token)
        self._http.post("/me/player/previous", token)
        return True

    def restart_song(self, access_token: Optional[str] = None) -> bool:
        """Seek the current track back to the start."""
        token = self._resolve_token(access_token)
        self._http.put("/me/player/seek", token, params={"position_ms": 0})
        return True

    def toggle_shuffle(self, access_token: Optional[str] = None) -> bool:
        """
        Flip the shuffle flag and return the new value.

        Known race: the state is read and then written in two calls, and
        Spotify offers no conditional update, so a change made elsewhere in
        between is overwritten.
        """
        token = self._resolve_token(access_token)

        state = self._http.get("/me/player", token) or {}
        current = bool(_require_dict(state, "playback state").get("shuffle_state", False))
        new_state = not current

        self._http.put(
            "/me/player/shuffle",
            token,
            params={"state": "true" if new_state else "false"},
        )
        logger.info("Shuffle %s", "on" if new_state else "off")
        return new_state

    def set_volume(self, volume: int, access_token: Optional[str] = None) -> bool:
        """
        Set the playback volume.

        Raises:
            ValueError: volume is not an integer in 0..100.
        """
        if isinstance(volume, bool) or not isinstance(volume, int) or not 0 <= volume <= 100:
            raise ValueError(f"Volume must be an integer between 0 and 100, got {volume!r}")

        token = self._resolve_token(access_token)
        self._http.put("/me/player/volume", token, params={"volume_percent": volume})
        return True

    def change_playlist(self, playlist_id: str, access_token: Optional[str] = None) -> bool:
        """Start playing the given playlist."""
        if not playlist_id:
            raise ValueError("playlist_id is required")

        token = self._resolve_token(access_token)
        self._http.put(
            "/me/player/play",
            token,
            json={"context_uri": f"spotify:playlist:{playlist_id}"},
        )
        logger.info("Switched to playlist %s", playlist_id)
        return True

    # =========================================================================
    # Read-only queries
    # =========================================================================

    def get_devices(self, access_token: Optional[str] = None) -> List[Dict[str, Any]]:
        token = self._resolve_token(access_token)
        return self._list_devices(token)

    def get_playback_state(self, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Return the full player state, or None when no device is active."""
        token = self._resolve_token(access_token)
        state = self._http.get("/me/player", token)
        if state is None:
            return None
        return _require_dict(state, "playback state")

    def fetch_playlists(self, access_token: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return all of the user's playlists, following pagination."""
        token = self._resolve_token(access_token)
        playlists = self._http.get_all_pages(
            "/me/playlists", token, params={"limit": PLAYLISTS_PAGE_SIZE},
        )
        logger.debug("Fetched %d playlists", len(playlists))
        return playlists

    def get_user_profile(self, access_token: Optional[str] = None) -> Dict[str, Any]:
        token = self._resolve_token(access_token)
        return _require_dict(self._http.get("/me", token), "user profile")

    def get_playlist_image(self, playlist_id: str, access_token: Optional[str] = None) -> str:
        """Return the playlist's cover URL, or the placeholder if it has none."""
        if not playlist_id:
            raise ValueError("playlist_id is required")

        token = self._resolve_token(access_token)
        images = self._http.get(f"/playlists/{quote(playlist_id, safe='')}/images", token)
        return _first_image_url(images)

    def _list_devices(self, token: str) -> List[Dict[str, Any]]:
        data = self._http.get("/me/player/devices", token) or {}
        devices = _require_dict(data, "devices").get("devices") or []
        if not isinstance(devices, list):
            raise SpotifyParseError(f"Unexpected devices list: {devices!r}")
        return devices
