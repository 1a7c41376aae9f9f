"""googledocs - Google Docs and Drive auth plumbing and raw REST requests.

This package manages how requests to the Google Docs API authenticate (OAuth
token or API key) and provides a small client that builds and sends raw
requests: get, create and batch-update a document.
"""
from .auth import (
    authenticate,
    build_auth_config,
    deauthorize,
    docs_api_key,
    docs_oauth_app,
    produce_auth_token,
)
from .client import DocsClient, as_id

__version__ = "0.1.0"
__all__ = [
    "DocsClient",
    "as_id",
    "authenticate",
    "build_auth_config",
    "deauthorize",
    "docs_api_key",
    "docs_oauth_app",
    "produce_auth_token",
]
