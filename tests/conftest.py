"""Shared fixtures: every test gets its own auth state and credentials dir."""
import pytest

from googledocs.auth.token_cache import set_token_cache
from googledocs.auth.oauth_config import OAuthApp, reload_oauth_config
from googledocs.auth.state import AuthState, set_auth_state


@pytest.fixture
def app():
    """OAuth app installed on the test auth state."""
    return OAuthApp(
        appname="googledocs-test",
        key="123456789.apps.googleusercontent.com",
        secret="abcdefghijklmnopqrstuvwxyz",
    )


@pytest.fixture
def state(app):
    """Fresh auth state with a known app and API key."""
    return AuthState(api_key="default-key", oauth_app=app)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch, state):
    """Point config at a temp dir and install a fresh global auth state."""
    for name in (
        "GOOGLE_OAUTH_CLIENT_ID",
        "GOOGLE_OAUTH_CLIENT_SECRET",
        "GOOGLEDOCS_API_KEY",
        "GOOGLEDOCS_OAUTH_CACHE",
        "GOOGLEDOCS_OOB_DEFAULT",
        "GOOGLEDOCS_CONSOLE_PROMPTS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GOOGLEDOCS_CREDENTIALS_DIR", str(tmp_path / "googledocs"))
    reload_oauth_config()
    set_token_cache(None)
    set_auth_state(state)
    yield
    set_token_cache(None)
    reload_oauth_config()
