"""
In-memory token store shared by the callback listener, the auth flow and
every playback command.

The lock guards only reads, copies and assignments. Callers copy the token
out and release the lock before any network I/O.
"""

import logging
import threading
from dataclasses import replace
from typing import Optional

from .auth import Credential

logger = logging.getLogger(__name__)


class TokenStore:
    """
    Holds one optional Credential and one optional pending authorization code.

    Created empty; the code slot is filled by the callback listener and the
    credential slot by a successful exchange or refresh. Nothing is
    persisted.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._credential: Optional[Credential] = None
        self._pending_code: Optional[str] = None

    def set_credential(self, credential: Credential) -> None:
        """Replace the stored credential."""
        with self._lock:
            self._credential = credential
        logger.debug("Credential stored (expires in %ss)", credential.expires_in)

    def get_credential(self) -> Optional[Credential]:
        """Return a copy of the stored credential, or None."""
        with self._lock:
            if self._credential is None:
                return None
            return replace(self._credential)

    def has_credential(self) -> bool:
        with self._lock:
            return self._credential is not None

    def set_pending_code(self, code: str) -> None:
        """Store an authorization code; the last write wins."""
        with self._lock:
            self._pending_code = code

    def take_pending_code(self) -> Optional[str]:
        """Return and clear the pending code (single use)."""
        with self._lock:
            code, self._pending_code = self._pending_code, None
        return code

    def discard_pending_code(self, code: str) -> bool:
        """Clear the pending code only if it still equals ``code``."""
        with self._lock:
            if self._pending_code is None or self._pending_code != code:
                return False
            self._pending_code = None
        return True

    def peek_pending_code(self) -> Optional[str]:
        """Return the pending code without consuming it."""
        with self._lock:
            return self._pending_code
