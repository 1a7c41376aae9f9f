"""
Auth state for googledocs.

AuthState answers one question for every outbound request: should it carry a
user credential (active) or the API key (inactive)? A process-wide default
instance is available through get_auth_state(), but request builders and the
auth functions also accept an explicit instance.
"""

import logging
from threading import RLock
from typing import Optional

from google.auth.credentials import Credentials

from .oauth_config import OAuthApp, default_api_key, default_oauth_app

logger = logging.getLogger(__name__)

_UNSET = object()


class AuthState:
    """
    Holds the active flag, current credential, API key and OAuth app.

    Every field is replaced wholesale through its setter; reads and writes are
    serialized with a re-entrant lock.
    """

    def __init__(
        self,
        api_key=_UNSET,
        oauth_app=_UNSET,
        active: bool = True,
    ) -> None:
        self._lock = RLock()
        self._active = active
        self._credential: Optional[Credentials] = None
        self._api_key: Optional[str] = (
            default_api_key() if api_key is _UNSET else api_key
        )
        self._oauth_app: Optional[OAuthApp] = (
            default_oauth_app() if oauth_app is _UNSET else oauth_app
        )

    @property
    def lock(self) -> RLock:
        return self._lock

    def set_active(self, value: bool) -> None:
        with self._lock:
            self._active = bool(value)

    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def set_credential(self, value: Optional[Credentials]) -> None:
        with self._lock:
            self._credential = value

    def get_credential(self) -> Optional[Credentials]:
        with self._lock:
            return self._credential

    def set_api_key(self, value: Optional[str]) -> None:
        with self._lock:
            self._api_key = value

    def get_api_key(self) -> Optional[str]:
        with self._lock:
            return self._api_key

    def set_oauth_app(self, value: Optional[OAuthApp]) -> None:
        with self._lock:
            self._oauth_app = value

    def get_oauth_app(self) -> Optional[OAuthApp]:
        with self._lock:
            return self._oauth_app

    def __repr__(self) -> str:
        return (
            f"AuthState(active={self._active}, "
            f"credential={'loaded' if self._credential is not None else None}, "
            f"api_key={'set' if self._api_key else None}, "
            f"oauth_app={self._oauth_app!r})"
        )


# Global auth state instance
_auth_state: Optional[AuthState] = None


def get_auth_state() -> AuthState:
    """Get the global auth state, creating it with built-in defaults on first use."""
    global _auth_state
    if _auth_state is None:
        _auth_state = AuthState()
        logger.debug("Initialized default auth state")
    return _auth_state


def set_auth_state(state: AuthState) -> None:
    """Set the global auth state instance."""
    global _auth_state
    _auth_state = state


def reset_auth_state() -> AuthState:
    """Replace the global auth state with a freshly defaulted one."""
    global _auth_state
    _auth_state = AuthState()
    return _auth_state
