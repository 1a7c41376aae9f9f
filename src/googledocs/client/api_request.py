"""Build, send and process raw requests against the Docs REST API."""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..auth.google_auth import TokenAuth, docs_api_key
from ..auth.state import AuthState
from ..utils.errors import handle_http_error

logger = logging.getLogger(__name__)

DOCS_BASE_URL = "https://docs.googleapis.com"

_TEMPLATE_RE = re.compile(r"\{(\+?)(\w+)\}")


@dataclass
class DocsRequest:
    """A request ready for request_make()."""

    method: str
    url: str
    params: dict[str, Any] = field(default_factory=dict)
    body: Optional[Any] = None
    token: Optional[TokenAuth] = None


def _expand_path(path: str, params: dict[str, Any]) -> str:
    """Substitute {name} and {+name} templates in path, consuming params."""
    def replace(match: re.Match) -> str:
        reserved, name = match.group(1), match.group(2)
        if name not in params:
            raise ValueError(f"Missing path parameter '{name}' for '{path}'")
        value = str(params.pop(name))
        return quote(value, safe="/" if reserved else "")

    return _TEMPLATE_RE.sub(replace, path)


def request_build(
    method: str = "GET",
    path: str = "",
    params: Optional[dict[str, Any]] = None,
    body: Optional[Any] = None,
    token: Optional[TokenAuth] = None,
    key: Optional[str] = None,
    base_url: str = DOCS_BASE_URL,
    state: Optional[AuthState] = None,
) -> DocsRequest:
    """Build a request for the Docs API.

    Path templates are filled from params; leftover params become query
    parameters. Without a token the API key is sent instead.

    Args:
        method: HTTP method.
        path: Path relative to base_url, e.g. "v1/documents/{documentId}".
        params: Path and query parameters.
        body: JSON-serializable request body.
        token: Result of produce_auth_token(), or None.
        key: API key, defaults to the configured key.
        base_url: API root.
        state: Auth state supplying the default API key.

    Returns:
        A DocsRequest.
    """
    params = dict(params or {})
    expanded = _expand_path(path, params)

    if token is None:
        key = key or docs_api_key(state)
        if key:
            params["key"] = key

    url = f"{base_url.rstrip('/')}/{expanded.lstrip('/')}"
    return DocsRequest(
        method=method.upper(), url=url, params=params, body=body, token=token
    )


def request_make(
    req: DocsRequest,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> requests.Response:
    """Send a built request.

    Args:
        req: Request from request_build().
        session: Optional session to send it with. Without one, a temporary
            session is opened and closed around the call.
        timeout: Optional timeout in seconds.

    Returns:
        The raw response.
    """
    logger.debug(f"{req.method} {req.url}")
    if session is not None:
        return _send(session, req, timeout)

    with requests.Session() as session:
        return _send(session, req, timeout)


def _send(
    session: requests.Session, req: DocsRequest, timeout: Optional[float]
) -> requests.Response:
    return session.request(
        req.method,
        req.url,
        params=req.params,
        json=req.body,
        auth=req.token,
        timeout=timeout,
    )


def response_process(
    response: requests.Response, document_id: Optional[str] = None
) -> dict[str, Any]:
    """Parse a JSON response, raising a GoogleDocsError on failure.

    Args:
        response: Response from request_make().
        document_id: Optional document ID for error context.

    Returns:
        The decoded JSON body (empty dict for an empty body).
    """
    if not response.ok:
        raise handle_http_error(response, document_id)
    if not response.content:
        return {}
    return response.json()
