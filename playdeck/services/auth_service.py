"""
Authentication service for the Spotify OAuth flow.

Ties the token exchange to the shared token store: builds the consent URL,
exchanges the captured code, refreshes, and stores the resulting credential.
"""

import logging
from typing import Iterable, Optional

from playdeck.spotify.auth import Credential, SpotifyAuthManager
from playdeck.spotify.exceptions import NotAuthenticatedError
from playdeck.spotify.token_store import TokenStore

logger = logging.getLogger(__name__)


class AuthService:
    """Service for obtaining and storing the Spotify credential."""

    def __init__(self, auth_manager: SpotifyAuthManager, token_store: TokenStore):
        self._auth_manager = auth_manager
        self._token_store = token_store

    def build_authorization_url(self, scopes: Optional[Iterable[str]] = None) -> str:
        """
        Generate the Spotify authorization URL.

        Args:
            scopes: Scopes to request; the default set when omitted.

        Raises:
            ConfigurationError: If the client id is missing.
        """
        return self._auth_manager.get_auth_url(scopes)

    def exchange_code(self, code: Optional[str] = None) -> Credential:
        """
        Exchange an authorization code and store the resulting credential.

        Args:
            code: The code from the redirect. When omitted, the code
                captured by the callback listener is taken from the store.

        Returns:
            The new Credential.

        Raises:
            NotAuthenticatedError: If no code was given or captured.
            SpotifyProviderError, SpotifyTransportError, SpotifyParseError:
                Propagated from the token exchange.
        """
        if not code:
            code = self._token_store.take_pending_code()
        if not code:
            raise NotAuthenticatedError(
                "No authorization code available. Complete the login in your browser first."
            )

        logger.info("Exchanging authorization code %s...", code[:6])
        credential = self._auth_manager.exchange_code(code)
        self._token_store.set_credential(credential)
        # a code passed in explicitly may still sit in the slot; it is spent now
        self._token_store.discard_pending_code(code)
        return credential

    def refresh(self, refresh_token: Optional[str] = None) -> Credential:
        """
        Refresh the credential and store the new one.

        Args:
            refresh_token: Token to use; defaults to the stored credential's.

        Raises:
            NotAuthenticatedError: If no refresh token is available.
        """
        if not refresh_token:
            current = self._token_store.get_credential()
            refresh_token = current.refresh_token if current else None
        if not refresh_token:
            raise NotAuthenticatedError(
                "No refresh token available. Log in again."
            )

        credential = self._auth_manager.refresh_token(refresh_token)
        self._token_store.set_credential(credential)
        return credential

    def store_credential(self, credential: Credential) -> None:
        """Place a credential obtained elsewhere into the store."""
        self._token_store.set_credential(credential)

    def get_credential(self) -> Optional[Credential]:
        return self._token_store.get_credential()

    def ensure_valid_credential(self) -> Credential:
        """
        Return the stored credential, refreshing it first if expired.

        Raises:
            NotAuthenticatedError: If nothing is stored, or the stored
                credential expired without a refresh token.
        """
        credential = self._token_store.get_credential()
        if credential is None:
            raise NotAuthenticatedError("Not authenticated with Spotify.")
        if not credential.is_expired:
            return credential

        logger.info("Token expired, attempting refresh")
        return self.refresh(credential.refresh_token)
