"""
Spotify authentication and token exchange.

Builds the consent URL and performs the two token-granting calls
(authorization code and refresh token). This module never touches the
token store; storing results is the caller's concern.
"""

import logging
import time
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote, urlencode

import requests
from requests.exceptions import RequestException, Timeout

from .credentials import SpotifyCredentials
from .exceptions import (
    ConfigurationError,
    SpotifyAuthError,
    SpotifyParseError,
    SpotifyProviderError,
    SpotifyTransportError,
)

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"
DEFAULT_TIMEOUT = 10  # seconds

# Scopes needed by the playback commands
DEFAULT_SCOPES = [
    "user-read-playback-state",
    "user-read-currently-playing",
    "user-modify-playback-state",
    "playlist-read-private",
    "playlist-read-collaborative",
    "user-read-private",
]


@dataclass(frozen=True)
class Credential:
    """
    Access/refresh token envelope returned by the token endpoint.

    Immutable: a refresh produces a new Credential.
    """

    access_token: str
    token_type: str
    expires_in: int
    scope: str
    refresh_token: Optional[str] = None
    obtained_at: float = field(default_factory=time.time, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        """
        Create a Credential from a token endpoint response body.

        Raises:
            SpotifyParseError: If the payload is not an object, a required
                field is missing, or expires_in is not an integer.
        """
        if not isinstance(data, dict):
            raise SpotifyParseError(
                f"Token data must be an object, got {type(data).__name__}"
            )

        required = ["access_token", "token_type", "expires_in", "scope"]
        missing = [k for k in required if data.get(k) is None]
        if missing:
            raise SpotifyParseError(f"Token missing required fields: {missing}")

        expires_in = data["expires_in"]
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise SpotifyParseError(
                f"Token expires_in must be an integer, got {expires_in!r}"
            )

        return cls(
            access_token=str(data["access_token"]),
            token_type=str(data["token_type"]),
            expires_in=expires_in,
            scope=str(data["scope"]),
            refresh_token=data.get("refresh_token"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for the UI layer."""
        result = asdict(self)
        result["expires_at"] = self.expires_at
        return result

    def with_refresh_token(self, refresh_token: Optional[str]) -> "Credential":
        """Return a copy carrying the given refresh token."""
        return replace(self, refresh_token=refresh_token)

    @property
    def expires_at(self) -> float:
        return self.obtained_at + self.expires_in

    @property
    def is_expired(self) -> bool:
        """Check if the access token has expired."""
        return self.expires_at < time.time()


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[str],
) -> str:
    """
    Build the Spotify consent-page URL.

    Pure function: the redirect URI and the space-joined scope string are
    percent-encoded (spaces become ``%20``).

    Raises:
        ConfigurationError: If client_id is empty.
    """
    if not client_id:
        raise ConfigurationError("client_id is required to build the authorization URL")

    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": " ".join(str(s).strip() for s in scopes if str(s).strip()),
    }
    return f"{AUTHORIZE_URL}?{urlencode(params, quote_via=quote)}"


class SpotifyAuthManager:
    """
    Performs the Spotify authorization-code grant.

    Stateless regarding tokens: it returns Credentials and leaves storing
    them to the caller.

    Example:
        credentials = SpotifyCredentials.from_env()
        auth_manager = SpotifyAuthManager(credentials)

        auth_url = auth_manager.get_auth_url()
        credential = auth_manager.exchange_code(code)
        credential = auth_manager.refresh_token(credential.refresh_token)
    """

    def __init__(
        self,
        credentials: SpotifyCredentials,
        scopes: Optional[list] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._credentials = credentials
        self._scopes = list(scopes or DEFAULT_SCOPES)
        self._timeout = timeout

    @property
    def redirect_uri(self) -> str:
        return self._credentials.redirect_uri

    def get_auth_url(self, scopes: Optional[Iterable[str]] = None) -> str:
        """Generate the authorization URL for the configured client."""
        url = build_authorization_url(
            self._credentials.client_id,
            self._credentials.redirect_uri,
            self._scopes if scopes is None else scopes,
        )
        logger.debug("Generated auth URL: %s...", url[:60])
        return url

    def exchange_code(self, code: str) -> Credential:
        """
        Exchange an authorization code for a Credential.

        The redirect_uri sent here is the same one used for the
        authorization URL; Spotify rejects the call otherwise.

        Raises:
            SpotifyAuthError: If code is empty.
            SpotifyProviderError: If Spotify rejects the exchange.
            SpotifyTransportError: On network failure or timeout.
            SpotifyParseError: If the response body is malformed.
        """
        if not code:
            raise SpotifyAuthError("Authorization code is required")

        payload = self._post_form({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self._credentials.redirect_uri,
        })
        credential = Credential.from_dict(payload)
        logger.info("Successfully exchanged code for token")
        return credential

    def refresh_token(self, refresh_token: str) -> Credential:
        """
        Obtain a new Credential from a refresh token.

        Spotify may omit refresh_token from the response; the one passed in
        is carried forward so the result can be refreshed again.

        Raises:
            SpotifyAuthError: If refresh_token is empty.
            SpotifyProviderError: If Spotify rejects the refresh.
            SpotifyTransportError: On network failure or timeout.
            SpotifyParseError: If the response body is malformed.
        """
        if not refresh_token:
            raise SpotifyAuthError("Cannot refresh: no refresh_token available")

        payload = self._post_form({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })
        credential = Credential.from_dict(payload)
        if not credential.refresh_token:
            credential = credential.with_refresh_token(refresh_token)

        logger.info("Successfully refreshed token")
        return credential

    def _post_form(self, form: Dict[str, str]) -> Dict[str, Any]:
        """POST a form to the token endpoint and return the JSON body."""
        data = dict(form)
        data["client_id"] = self._credentials.client_id
        data["client_secret"] = self._credentials.client_secret

        try:
            response = requests.post(
                TOKEN_URL,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self._timeout,
            )
        except Timeout as e:
            logger.error("Token request timed out after %ss", self._timeout)
            raise SpotifyTransportError(f"Token request timed out: {e}") from e
        except RequestException as e:
            logger.error("Token request failed: %s", e)
            raise SpotifyTransportError(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Token endpoint returned %d (%s)",
                response.status_code, form["grant_type"],
            )
            raise SpotifyProviderError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise SpotifyParseError(
                f"Token response was not JSON: {response.text}"
            ) from e
