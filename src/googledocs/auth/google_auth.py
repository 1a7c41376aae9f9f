"""
Core Google OAuth Logic for googledocs.

This module decides how the next Docs API request authenticates. It obtains
credentials (service account file, token cache or interactive installed-app
flow), checks that they are usable, stores them in an AuthState and hands out
request-ready auth objects.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Sequence, Union

import requests
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from oauthlib.oauth2.rfc6749.errors import InvalidClientError, InvalidRequestError

from ..utils.errors import (
    AuthenticationError,
    ConfigConflictError,
    InvalidCredentialError,
)
from .oauth_config import OAuthApp, get_oauth_config
from .scopes import DRIVE_SCOPE, normalize_scopes
from .state import AuthState, get_auth_state
from .token_cache import TokenCache, get_token_cache

logger = logging.getLogger(__name__)

OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

INVALID_CLIENT = "invalid_client"
INVALID_REQUEST = "invalid_request"


def _state(state: Optional[AuthState]) -> AuthState:
    return state if state is not None else get_auth_state()


# ---------------------------------------------------------------------------
# State accessors
# ---------------------------------------------------------------------------

def set_auth_active(value: bool, state: Optional[AuthState] = None) -> None:
    _state(state).set_active(value)


def auth_active(state: Optional[AuthState] = None) -> bool:
    return _state(state).is_active()


def set_access_cred(value: Optional[Credentials], state: Optional[AuthState] = None) -> None:
    _state(state).set_credential(value)


def access_cred(state: Optional[AuthState] = None) -> Optional[Credentials]:
    return _state(state).get_credential()


def set_api_key(value: Optional[str], state: Optional[AuthState] = None) -> None:
    _state(state).set_api_key(value)


def docs_api_key(state: Optional[AuthState] = None) -> Optional[str]:
    """
    Get the configured API key.

    By default this is the built-in key; build_auth_config() can replace it.
    """
    return _state(state).get_api_key()


def set_oauth_app(value: Optional[OAuthApp], state: Optional[AuthState] = None) -> None:
    _state(state).set_oauth_app(value)


def docs_oauth_app(state: Optional[AuthState] = None) -> Optional[OAuthApp]:
    """
    Get the configured OAuth app.

    By default this is the built-in app; build_auth_config() can replace it.
    """
    return _state(state).get_oauth_app()


def access_token(state: Optional[AuthState] = None) -> Optional[str]:
    """Reveal the raw access token of the current credential, if any."""
    cred = access_cred(state)
    if cred is None:
        return None
    return getattr(cred, "token", None)


# ---------------------------------------------------------------------------
# Token acquisition
# ---------------------------------------------------------------------------

def _resolve_cache(cache: Union[bool, str, None]) -> Optional[TokenCache]:
    if cache is None:
        cache = get_oauth_config().oauth_cache
    if cache is False:
        return None
    if cache is True:
        return get_token_cache()
    return TokenCache(cache)


def get_user_email(credentials: Credentials) -> Optional[str]:
    """
    Fetch the email address of the account behind a user credential.

    Args:
        credentials: Valid Google credentials carrying the userinfo.email scope

    Returns:
        Email address or None
    """
    try:
        service = build("oauth2", "v2", credentials=credentials, cache_discovery=False)
        user_info = service.userinfo().get().execute()
        return user_info.get("email")
    except HttpError as e:
        logger.error(f"HttpError fetching user info: {e.status_code}")
        return None
    except GoogleAuthError as e:
        logger.error(f"Error fetching user info: {e}")
        return None


def _load_cached_token(
    cache: TokenCache, email: Optional[str], scopes: List[str]
) -> Optional[Credentials]:
    if email is None:
        emails = cache.emails(scopes)
        if len(emails) != 1:
            return None
        email = emails[0]

    credentials = cache.load(email, scopes)
    if credentials is None:
        return None

    if credentials.valid:
        logger.debug(f"Using cached token for {email}")
        return credentials

    if credentials.expired and credentials.refresh_token:
        logger.info(f"Cached token for {email} expired, attempting refresh")
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            logger.warning(f"Token refresh failed: {e}")
            return None
        cache.save(email, scopes, credentials)
        return credentials

    logger.warning(f"Cached token for {email} is invalid and cannot be refreshed")
    return None


def _cache_new_token(
    cache: Optional[TokenCache],
    email: Optional[str],
    scopes: List[str],
    credentials: Credentials,
) -> None:
    if cache is None:
        return
    user_email = email or get_user_email(credentials)
    if user_email:
        cache.save(user_email, scopes, credentials)
    else:
        logger.warning("Could not determine account email; token not cached")


def _exchange(step: Callable[[], Credentials]) -> Credentials:
    """Run a token exchange, turning oauthlib client/request errors into InvalidCredentialError."""
    try:
        return step()
    except InvalidClientError as e:
        raise InvalidCredentialError(
            "Authorization error. Please check client_id and client_secret."
        ) from e
    except InvalidRequestError as e:
        raise InvalidCredentialError(
            "Authorization error. No access token obtained."
        ) from e


@dataclass
class PendingOOBFlow:
    """An out-of-band flow waiting for the user to paste back a code."""

    flow: InstalledAppFlow
    auth_url: str
    scopes: List[str]
    email: Optional[str] = None


def start_oob_flow(
    app: OAuthApp,
    scopes: Union[str, Sequence[str], None] = DRIVE_SCOPE,
    email: Optional[str] = None,
) -> PendingOOBFlow:
    """
    Begin a copy/paste authorization flow.

    Args:
        app: OAuth app to authorize
        scopes: Scope or scopes to request
        email: Optional email used as a login hint and cache key

    Returns:
        PendingOOBFlow whose auth_url the user must visit
    """
    scopes = normalize_scopes(scopes)
    flow = InstalledAppFlow.from_client_config(app.to_client_config(), scopes=scopes)
    flow.redirect_uri = OOB_REDIRECT_URI
    kwargs = {"prompt": "consent"}
    if email:
        kwargs["login_hint"] = email
    auth_url, _ = flow.authorization_url(**kwargs)
    return PendingOOBFlow(flow=flow, auth_url=auth_url, scopes=scopes, email=email)


def finish_oob_flow(
    pending: PendingOOBFlow,
    code: str,
    cache: Union[bool, str, None] = None,
) -> Credentials:
    """
    Exchange the pasted authorization code for a credential and cache it.

    Raises:
        InvalidCredentialError: If the token endpoint rejects the client or request
    """
    return _finish_oob(pending, code, _resolve_cache(cache))


def _finish_oob(
    pending: PendingOOBFlow, code: str, token_cache: Optional[TokenCache]
) -> Credentials:
    def step() -> Credentials:
        pending.flow.fetch_token(code=code.strip())
        return pending.flow.credentials

    credentials = _exchange(step)
    _cache_new_token(token_cache, pending.email, pending.scopes, credentials)
    return credentials


def _prompt_for_code(pending: PendingOOBFlow) -> str:
    if not get_oauth_config().console_prompts:
        raise AuthenticationError(
            "Interactive authorization is needed but console prompts are disabled. "
            f"Visit {pending.auth_url} and pass the code to complete_google_auth."
        )
    sys.stderr.write(
        f"Please visit this URL to authorize googledocs:\n\n{pending.auth_url}\n\n"
        "Enter the authorization code: "
    )
    sys.stderr.flush()
    return sys.stdin.readline()


def fetch_token(
    scopes: Union[str, Sequence[str], None],
    app: Optional[OAuthApp],
    email: Optional[str] = None,
    path: Optional[str] = None,
    package: str = "googledocs",
    cache: Union[bool, str, None] = None,
    use_oob: Optional[bool] = None,
) -> Credentials:
    """
    Obtain a credential, trying each source in turn.

    Args:
        scopes: Scope or scopes to request
        app: OAuth app used if an interactive flow is needed
        email: Optional email of the Google account to use
        path: Optional path to a service account JSON key file
        package: Name of the package requesting the token, for messages
        cache: False, True, a cache directory, or None for the configured default
        use_oob: Use a copy/paste flow instead of a local redirect server

    Returns:
        A google-auth Credentials object

    Raises:
        InvalidCredentialError: If the token endpoint rejects the client or request
        ValueError: If an interactive flow is needed and no OAuth app is configured
    """
    scopes = normalize_scopes(scopes)

    if path is not None:
        logger.info(f"Loading service account token from {path}")
        return service_account.Credentials.from_service_account_file(path, scopes=scopes)

    token_cache = _resolve_cache(cache)
    if token_cache is not None:
        credentials = _load_cached_token(token_cache, email, scopes)
        if credentials is not None:
            return credentials

    if app is None:
        raise ValueError(
            f"No OAuth app configured for {package}. Set GOOGLE_OAUTH_CLIENT_ID and "
            f"GOOGLE_OAUTH_CLIENT_SECRET, or call build_auth_config(path=...)."
        )

    if use_oob is None:
        use_oob = get_oauth_config().oob_default

    logger.info(f"Starting OAuth flow for {package} with app '{app.appname}'")
    if use_oob:
        pending = start_oob_flow(app, scopes, email)
        return _finish_oob(pending, _prompt_for_code(pending), token_cache)

    flow = InstalledAppFlow.from_client_config(app.to_client_config(), scopes=scopes)
    if email:
        credentials = _exchange(lambda: flow.run_local_server(port=0, login_hint=email))
    else:
        credentials = _exchange(lambda: flow.run_local_server(port=0))

    _cache_new_token(token_cache, email, scopes, credentials)
    return credentials


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _flatten(value: Any) -> Iterator[Any]:
    if isinstance(value, dict):
        for item in value.values():
            yield from _flatten(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            yield from _flatten(item)
    else:
        yield value


def validate_credential(cred: Any, verbose: bool = False) -> bool:
    """
    Check that a credential appears to be legitimate.

    Some token endpoints report failures by embedding "invalid_client" or
    "invalid_request" in an otherwise normal looking token bundle, so every
    attribute value of the credential is scanned for those markers.

    Args:
        cred: Candidate credential
        verbose: Log the reason a credential is rejected

    Returns:
        True if the credential is a google-auth Credentials object free of
        error markers
    """
    if not isinstance(cred, Credentials):
        if verbose:
            logger.warning("Not a google-auth Credentials object.")
        return False

    values = list(_flatten(vars(cred)))

    if INVALID_CLIENT in values:
        if verbose:
            logger.warning(
                "Authorization error. Please check client_id and client_secret."
            )
        return False

    if INVALID_REQUEST in values:
        if verbose:
            logger.warning("Authorization error. No access token obtained.")
        return False

    return True


# ---------------------------------------------------------------------------
# User-facing auth operations
# ---------------------------------------------------------------------------


def _store_credential(cred: Credentials, state: AuthState) -> None:
    if not validate_credential(cred, verbose=True):
        raise InvalidCredentialError("Authorization did not produce a usable token.")

    with state.lock:
        state.set_credential(cred)
        state.set_active(True)
    logger.info("Authenticated; auth state is active")


def authenticate(
    email: Optional[str] = None,
    path: Optional[str] = None,
    scopes: Union[str, Sequence[str]] = DRIVE_SCOPE,
    cache: Union[bool, str, None] = None,
    use_oob: Optional[bool] = None,
    state: Optional[AuthState] = None,
) -> None:
    """
    Authorize googledocs to view and manage your Drive files.

    Loads a cached token when one exists (refreshing it if needed), otherwise
    sends you to the browser to sign in and grant access. The token is stored
    in the auth state and auth is made active.

    Args:
        email: Optional email of the Google account to use
        path: Optional path to a service account JSON key file
        scopes: Scope or scopes to request (default: full Drive access)
        cache: False, True, a cache directory, or None for the configured default
        use_oob: Use a copy/paste flow instead of a local redirect server

    Raises:
        InvalidCredentialError: If the obtained credential is not usable
    """
    state = _state(state)
    cred = fetch_token(
        scopes=scopes,
        app=state.get_oauth_app(),
        email=email,
        path=path,
        package="googledocs",
        cache=cache,
        use_oob=use_oob,
    )
    _store_credential(cred, state)


def complete_oob_auth(
    pending: PendingOOBFlow,
    code: str,
    cache: Union[bool, str, None] = None,
    state: Optional[AuthState] = None,
) -> None:
    """
    Second half of a copy/paste authorization started with start_oob_flow().

    Exchanges the code, caches the token and makes auth active, exactly as
    authenticate() does for the other flows.
    """
    _store_credential(finish_oob_flow(pending, code, cache=cache), _state(state))


def deauthorize(verbose: bool = True, state: Optional[AuthState] = None) -> None:
    """
    Put googledocs into a de-authorized state.

    Requests will carry the API key instead of a token, which is enough for
    public documents and never triggers a browser flow.
    """
    state = _state(state)
    with state.lock:
        state.set_active(False)
        state.set_credential(None)
    if verbose:
        logger.info("Auth deactivated; requests will use the API key")


@dataclass
class AuthConfig:
    """Snapshot of the auth configuration."""

    active: bool
    oauth_app_name: Optional[str]
    api_key: Optional[str]
    token_loaded: bool = False

    def __str__(self) -> str:
        return "\n".join([
            f"googledocs auth state: {'active' if self.active else 'inactive'}",
            f"oauth app: {self.oauth_app_name}",
            f"API key: {'unset' if self.api_key is None else 'set'}",
            f"token: {'loaded' if self.token_loaded else 'not loaded'}",
        ])


def build_auth_config(
    app: Optional[OAuthApp] = None,
    path: Optional[str] = None,
    api_key: Optional[str] = None,
    state: Optional[AuthState] = None,
) -> AuthConfig:
    """
    View or set the OAuth app and API key.

    Args:
        app: OAuth app to use for new authorization flows
        path: Path to a client secrets JSON file to build the app from
        api_key: API key for requests made while auth is inactive

    Returns:
        AuthConfig snapshot of the resulting configuration

    Raises:
        ConfigConflictError: If both app and path are given
    """
    if app is not None and not isinstance(app, OAuthApp):
        raise TypeError(f"app must be an OAuthApp, not {type(app).__name__}")
    if path is not None and not isinstance(path, str):
        raise TypeError(f"path must be a string, not {type(path).__name__}")
    if api_key is not None and not isinstance(api_key, str):
        raise TypeError(f"api_key must be a string, not {type(api_key).__name__}")

    if app is not None and path is not None:
        raise ConfigConflictError("Don't provide both 'app' and 'path'. Pick one.")

    if app is None and path is not None:
        app = OAuthApp.from_json(path)

    state = _state(state)
    with state.lock:
        state.set_oauth_app(app if app is not None else state.get_oauth_app())
        state.set_api_key(api_key if api_key is not None else state.get_api_key())

        current_app = state.get_oauth_app()
        return AuthConfig(
            active=state.is_active(),
            oauth_app_name=current_app.appname if current_app is not None else None,
            api_key=state.get_api_key(),
            token_loaded=state.get_credential() is not None,
        )


# ---------------------------------------------------------------------------
# Token accessors for request builders
# ---------------------------------------------------------------------------

class TokenAuth(requests.auth.AuthBase):
    """
    Attaches a google-auth credential to outgoing requests, refreshing as needed.

    Without an explicit transport request, each refresh runs on a short-lived
    session that is closed afterwards.
    """

    def __init__(self, credentials: Credentials, request: Optional[Request] = None) -> None:
        self.credentials = credentials
        self._request = request

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        if self._request is not None:
            self.credentials.before_request(self._request, r.method, r.url, r.headers)
            return r

        with requests.Session() as session:
            self.credentials.before_request(Request(session), r.method, r.url, r.headers)
        return r


def ensure_credential(state: Optional[AuthState] = None) -> Optional[Credentials]:
    """
    Return the cached credential, authenticating first if there is none.

    Returns None if auth has been deactivated, so a concurrent deauthorize()
    never triggers a new flow.
    """
    state = _state(state)
    with state.lock:
        if not state.is_active():
            return None
        cred = state.get_credential()
        if cred is None:
            authenticate(state=state)
            cred = state.get_credential()
    return cred


def produce_auth_token(state: Optional[AuthState] = None) -> Optional[TokenAuth]:
    """
    Produce a token prepared for request_build().

    Returns:
        None if auth is inactive (send the API key instead), otherwise a
        TokenAuth wrapping the current credential
    """
    state = _state(state)
    with state.lock:
        cred = ensure_credential(state)
    if cred is None:
        return None
    return TokenAuth(cred)
