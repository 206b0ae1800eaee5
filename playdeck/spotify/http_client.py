"""
Lightweight HTTP client for the Spotify Web API.

Wraps requests.Session with per-request bearer authorization, a bounded
timeout on every call, and uniform status mapping. There are no retries:
callers decide whether to try again.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import RequestException, Timeout

from .auth import DEFAULT_TIMEOUT
from .exceptions import (
    SpotifyParseError,
    SpotifyProviderError,
    SpotifyTransportError,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://api.spotify.com/v1"


class SpotifyHTTPClient:
    """
    HTTP client for Spotify Web API requests.

    The bearer token is passed on each call rather than held by the client,
    so one instance can serve concurrent commands using whatever token each
    of them copied out of the store. Each worker thread gets its own
    requests.Session.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, base_url: str = BASE_URL):
        """
        Initialize the HTTP client.

        Args:
            timeout: Seconds before a request is abandoned as a transport
                failure. Always applied.
            base_url: API root, overridable for tests.
        """
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def _session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update({
                "Accept": "application/json",
                "Content-Type": "application/json",
            })
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        """Close every session opened by this client."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    # -----------------------------------------------------------------
    # Public HTTP methods
    # -----------------------------------------------------------------

    def get(self, path: str, access_token: str, params: Optional[Dict] = None) -> Any:
        """Send a GET request."""
        return self._request("GET", path, access_token, params=params)

    def post(
        self,
        path: str,
        access_token: str,
        json: Any = None,
        params: Optional[Dict] = None,
    ) -> Any:
        """Send a POST request. A missing body is sent as ``{}``."""
        return self._request(
            "POST", path, access_token, params=params,
            json={} if json is None else json,
        )

    def put(
        self,
        path: str,
        access_token: str,
        json: Any = None,
        params: Optional[Dict] = None,
    ) -> Any:
        """Send a PUT request. A missing body is sent as ``{}``."""
        return self._request(
            "PUT", path, access_token, params=params,
            json={} if json is None else json,
        )

    def get_all_pages(
        self,
        path: str,
        access_token: str,
        params: Optional[Dict] = None,
        items_key: str = "items",
    ) -> List[Dict]:
        """
        Fetch all pages of a paginated endpoint.

        Follows the ``next`` URL in each response until exhausted.

        Args:
            path: Initial API path (e.g. ``/me/playlists``).
            access_token: Bearer token for every page request.
            params: Optional query parameters for the first request.
            items_key: Key containing the list items (default ``items``).

        Returns:
            Concatenated list of all items across pages.
        """
        all_items: List[Dict] = []
        data = self._request("GET", path, access_token, params=params)

        while data:
            all_items.extend(data.get(items_key) or [])
            next_url = data.get("next")
            if not next_url:
                break
            # ``next`` is absolute and embeds its own query params
            data = self._request_url("GET", next_url, access_token)

        return all_items

    # -----------------------------------------------------------------
    # Internal request handling
    # -----------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        access_token: str,
        params: Optional[Dict] = None,
        json: Any = None,
    ) -> Any:
        """Make a request to a relative API path."""
        url = f"{self._base_url}{path}"
        return self._request_url(method, url, access_token, params=params, json=json)

    def _request_url(
        self,
        method: str,
        url: str,
        access_token: str,
        params: Optional[Dict] = None,
        json: Any = None,
    ) -> Any:
        """
        Execute one HTTP request and map the result.

        Returns:
            Parsed JSON body, or None for 204 and empty 2xx bodies.

        Raises:
            SpotifyProviderError: Non-2xx status, body kept verbatim.
            SpotifyTransportError: Connection failure or timeout.
            SpotifyParseError: 2xx response whose body is not JSON.
        """
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._timeout,
            )
        except Timeout as e:
            logger.warning("%s %s timed out after %ss", method, url, self._timeout)
            raise SpotifyTransportError(f"Request timed out: {e}") from e
        except RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise SpotifyTransportError(f"Request failed: {e}") from e

        if response.status_code == 204:
            return None

        if not 200 <= response.status_code < 300:
            logger.info("%s %s returned %d", method, url, response.status_code)
            raise SpotifyProviderError(response.status_code, response.text)

        if not response.text or not response.text.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise SpotifyParseError(
                f"Response from {url} was not JSON: {response.text}"
            ) from e
