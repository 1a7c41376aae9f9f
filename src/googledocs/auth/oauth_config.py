"""
OAuth Configuration Management for googledocs.

This module centralizes OAuth-related configuration: the OAuth app descriptor,
the built-in app and API key, and token caching defaults. Values come from the
environment (a local .env file is honoured) or from client_secret.json in the
credentials directory.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class OAuthApp:
    """Identity of the OAuth client used to start new authorization flows."""

    appname: str
    key: str
    secret: str
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI
    redirect_uris: List[str] = field(default_factory=lambda: ["http://localhost"])

    @classmethod
    def from_json(cls, path: str) -> "OAuthApp":
        """
        Load an OAuth app from a client secrets JSON file.

        Args:
            path: Path to the JSON downloaded from Google Cloud Console.

        Returns:
            OAuthApp built from the "installed" or "web" section.

        Raises:
            ValueError: If the file has neither section.
            IOError: If the file cannot be read.
        """
        with open(path, "r") as f:
            client_config = json.load(f)

        if "installed" in client_config:
            info = client_config["installed"]
        elif "web" in client_config:
            info = client_config["web"]
        else:
            raise ValueError(f"Invalid client secrets file format: {path}")

        logger.info(f"Loaded OAuth app from {path}")
        return cls(
            appname=info.get("project_id", os.path.basename(path)),
            key=info["client_id"],
            secret=info["client_secret"],
            auth_uri=info.get("auth_uri", GOOGLE_AUTH_URI),
            token_uri=info.get("token_uri", GOOGLE_TOKEN_URI),
            redirect_uris=info.get("redirect_uris", ["http://localhost"]),
        )

    def to_client_config(self) -> Dict[str, Any]:
        """Client config in the shape InstalledAppFlow.from_client_config expects."""
        return {
            "installed": {
                "client_id": self.key,
                "client_secret": self.secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": list(self.redirect_uris),
            }
        }

    def __repr__(self) -> str:
        return f"OAuthApp(appname={self.appname!r}, key={self.key!r})"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class OAuthConfig:
    """
    Centralized OAuth configuration management.

    Provides a single source of truth for the built-in OAuth app, API key and
    token caching behaviour.
    """

    def __init__(self) -> None:
        # Credentials directory
        self.credentials_dir = os.path.expanduser(
            os.getenv("GOOGLEDOCS_CREDENTIALS_DIR", "~/.googledocs")
        )

        # OAuth client configuration (from environment or client_secret.json)
        self.client_id = os.getenv("GOOGLE_OAUTH_CLIENT_ID")
        self.client_secret = os.getenv("GOOGLE_OAUTH_CLIENT_SECRET")
        self.client_secrets_path = os.path.join(
            self.credentials_dir, "client_secret.json"
        )

        self.api_key = os.getenv("GOOGLEDOCS_API_KEY")

        # Token cache lives below the credentials directory
        self.cache_dir = os.path.join(self.credentials_dir, "credentials")
        self.oauth_cache = _env_flag("GOOGLEDOCS_OAUTH_CACHE", True)
        self.oob_default = _env_flag("GOOGLEDOCS_OOB_DEFAULT", False)
        # Off when stdin/stdout carry a protocol, e.g. the MCP stdio transport
        self.console_prompts = _env_flag("GOOGLEDOCS_CONSOLE_PROMPTS", True)

    def default_oauth_app(self) -> Optional[OAuthApp]:
        """
        Built-in OAuth app.

        Environment variables win over client_secret.json. Returns None when
        neither is configured.
        """
        if self.client_id and self.client_secret:
            return OAuthApp(
                appname="googledocs",
                key=self.client_id,
                secret=self.client_secret,
            )

        if os.path.exists(self.client_secrets_path):
            try:
                return OAuthApp.from_json(self.client_secrets_path)
            except (IOError, ValueError, KeyError, json.JSONDecodeError) as e:
                logger.error(
                    f"Error loading client secrets from {self.client_secrets_path}: {e}"
                )

        return None

    def is_configured(self) -> bool:
        """Check if an OAuth app is available."""
        if self.client_id and self.client_secret:
            return True
        return os.path.exists(self.client_secrets_path)


# Global configuration instance
_oauth_config: Optional[OAuthConfig] = None


def get_oauth_config() -> OAuthConfig:
    """Get the global OAuth configuration instance."""
    global _oauth_config
    if _oauth_config is None:
        _oauth_config = OAuthConfig()
    return _oauth_config


def reload_oauth_config() -> OAuthConfig:
    """Reload the OAuth configuration from environment variables."""
    global _oauth_config
    _oauth_config = OAuthConfig()
    return _oauth_config


# Convenience functions
def default_oauth_app() -> Optional[OAuthApp]:
    """Get the built-in OAuth app."""
    return get_oauth_config().default_oauth_app()


def default_api_key() -> Optional[str]:
    """Get the built-in API key."""
    return get_oauth_config().api_key
