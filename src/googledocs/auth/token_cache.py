"""
On-disk OAuth token cache for googledocs.

Each entry is one authorized-user JSON file named after the requested scopes
and the account email, so a token obtained for one scope set is never handed
out for another.
"""

import hashlib
import json
import logging
import os
from typing import List, Optional, Sequence

from google.oauth2.credentials import Credentials

from .oauth_config import get_oauth_config

logger = logging.getLogger(__name__)


def scope_key(scopes: Sequence[str]) -> str:
    """Short, order-independent hash of a scope set."""
    joined = " ".join(sorted(set(scopes)))
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:12]


class TokenCache:
    """Directory of cached user tokens, keyed by scope set and email."""

    def __init__(self, cache_dir: Optional[str] = None) -> None:
        if cache_dir is None:
            cache_dir = get_oauth_config().cache_dir
        self.cache_dir = os.path.expanduser(cache_dir)

    def _path(self, email: str, scopes: Sequence[str]) -> str:
        return os.path.join(self.cache_dir, f"{scope_key(scopes)}_{email}.json")

    def emails(self, scopes: Sequence[str]) -> List[str]:
        """Emails with a cached token for exactly these scopes."""
        if not os.path.isdir(self.cache_dir):
            return []
        prefix = f"{scope_key(scopes)}_"
        return sorted(
            name[len(prefix):-len(".json")]
            for name in os.listdir(self.cache_dir)
            if name.startswith(prefix) and name.endswith(".json")
        )

    def load(self, email: str, scopes: Sequence[str]) -> Optional[Credentials]:
        """
        Load the cached token for an account.

        Returns:
            Credentials, or None when nothing usable is cached.
        """
        path = self._path(email, scopes)
        if not os.path.exists(path):
            logger.debug(f"No cached token for {email}")
            return None

        try:
            with open(path, "r") as f:
                info = json.load(f)
            return Credentials.from_authorized_user_info(info, scopes=list(scopes))
        except (IOError, ValueError) as e:
            logger.error(f"Error loading cached token for {email}: {e}")
            return None

    def save(self, email: str, scopes: Sequence[str], credentials: Credentials) -> bool:
        """Write a token to the cache, replacing any previous entry."""
        os.makedirs(self.cache_dir, exist_ok=True)
        path = self._path(email, scopes)
        try:
            with open(path, "w") as f:
                f.write(credentials.to_json())
            logger.info(f"Cached token for {email}")
            return True
        except IOError as e:
            logger.error(f"Error caching token for {email}: {e}")
            return False


# Global token cache instance
_token_cache: Optional[TokenCache] = None


def get_token_cache() -> TokenCache:
    """Get the global token cache, rooted at the configured cache directory."""
    global _token_cache
    if _token_cache is None:
        _token_cache = TokenCache()
    return _token_cache


def set_token_cache(cache: Optional[TokenCache]) -> None:
    """Set the global token cache instance; None rebuilds it on next use."""
    global _token_cache
    _token_cache = cache
