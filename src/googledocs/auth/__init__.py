"""
Authentication package for googledocs.

This package manages how requests to the Docs and Drive APIs authenticate:
- OAuth app and API key configuration
- Token acquisition, caching and refresh
- An explicit AuthState plus a process-wide default instance
"""

from .scopes import DRIVE_SCOPE, DRIVE_SCOPES, DOCS_SCOPES, DOCS_WRITE_SCOPE
from .oauth_config import OAuthApp, get_oauth_config, reload_oauth_config
from .state import AuthState, get_auth_state, set_auth_state, reset_auth_state
from .token_cache import TokenCache, get_token_cache, set_token_cache
from .google_auth import (
    AuthConfig,
    PendingOOBFlow,
    TokenAuth,
    access_cred,
    access_token,
    auth_active,
    authenticate,
    build_auth_config,
    complete_oob_auth,
    deauthorize,
    docs_api_key,
    docs_oauth_app,
    ensure_credential,
    fetch_token,
    finish_oob_flow,
    produce_auth_token,
    set_access_cred,
    set_api_key,
    set_auth_active,
    set_oauth_app,
    start_oob_flow,
    validate_credential,
)

__all__ = [
    # Scopes
    "DRIVE_SCOPE",
    "DRIVE_SCOPES",
    "DOCS_SCOPES",
    "DOCS_WRITE_SCOPE",
    # Config
    "OAuthApp",
    "get_oauth_config",
    "reload_oauth_config",
    # State
    "AuthState",
    "get_auth_state",
    "set_auth_state",
    "reset_auth_state",
    # Token Cache
    "TokenCache",
    "get_token_cache",
    "set_token_cache",
    # Auth Functions
    "AuthConfig",
    "PendingOOBFlow",
    "TokenAuth",
    "access_cred",
    "access_token",
    "auth_active",
    "authenticate",
    "build_auth_config",
    "complete_oob_auth",
    "deauthorize",
    "docs_api_key",
    "docs_oauth_app",
    "ensure_credential",
    "fetch_token",
    "finish_oob_flow",
    "produce_auth_token",
    "set_access_cred",
    "set_api_key",
    "set_auth_active",
    "set_oauth_app",
    "start_oob_flow",
    "validate_credential",
]
