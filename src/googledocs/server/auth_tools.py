"""Authentication MCP tools for googledocs."""

import logging
from typing import Optional

from .main import mcp
from ..auth import (
    PendingOOBFlow,
    authenticate,
    build_auth_config,
    complete_oob_auth,
    deauthorize,
    docs_oauth_app,
    start_oob_flow,
)
from ..auth.oauth_config import get_oauth_config
from ..utils.errors import GoogleDocsError, format_error

logger = logging.getLogger(__name__)

# Copy/paste flow waiting for complete_google_auth
_pending_oob: Optional[PendingOOBFlow] = None


@mcp.tool()
def google_auth_status() -> str:
    """
    Show the current googledocs auth configuration: whether requests use a
    token or the API key, which OAuth app is configured, and whether a token
    is loaded.
    """
    return str(build_auth_config())


@mcp.tool()
def start_google_auth(email: Optional[str] = None, use_oob: bool = False) -> str:
    """
    Authenticate with Google, loading a cached token if one exists and
    otherwise opening the browser consent flow.

    NOTE: Most tools authenticate automatically on first use. Call this to
    switch accounts or to re-enable auth after deauthorize_google.

    Args:
        email: Optional email of the Google account to use.
        use_oob: Return a URL to visit instead of opening a browser. Pass the
            code Google shows to complete_google_auth.
    """
    global _pending_oob

    if not get_oauth_config().is_configured():
        return (
            "**Authentication Error:** OAuth client credentials not found. Set "
            "GOOGLE_OAUTH_CLIENT_ID and GOOGLE_OAUTH_CLIENT_SECRET or place "
            f"client_secret.json in {get_oauth_config().credentials_dir}"
        )

    try:
        if use_oob:
            _pending_oob = start_oob_flow(docs_oauth_app(), email=email)
            return (
                "Visit this URL to authorize googledocs, then call "
                f"complete_google_auth with the code shown:\n\n{_pending_oob.auth_url}"
            )
        authenticate(email=email)
        return f"Authenticated.\n{build_auth_config()}"
    except GoogleDocsError as e:
        return format_error("Authentication", e)
    except Exception as e:
        logger.error(f"Failed to authenticate: {e}", exc_info=True)
        return f"**Error:** An unexpected error occurred: {e}"


@mcp.tool()
def complete_google_auth(code: str) -> str:
    """
    Finish an authorization started with start_google_auth(use_oob=True).

    Args:
        code: The authorization code Google displayed after consent.
    """
    global _pending_oob

    if _pending_oob is None:
        return "No authorization in progress. Call start_google_auth(use_oob=True) first."

    try:
        complete_oob_auth(_pending_oob, code)
        _pending_oob = None
        return f"Authenticated.\n{build_auth_config()}"
    except GoogleDocsError as e:
        return format_error("Authentication", e)
    except Exception as e:
        logger.error(f"Failed to complete authentication: {e}", exc_info=True)
        return f"**Error:** An unexpected error occurred: {e}"


@mcp.tool()
def deauthorize_google() -> str:
    """
    Stop sending a token. Requests will carry the API key instead, which is
    enough for public documents.
    """
    deauthorize()
    return f"Deauthorized.\n{build_auth_config()}"
