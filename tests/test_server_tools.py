"""Unit tests for the MCP tools."""
from unittest.mock import Mock, patch

import pytest
from google.oauth2.credentials import Credentials

from googledocs import server
from googledocs.auth.oauth_config import get_oauth_config, reload_oauth_config
from googledocs.server import auth_tools, doc_tools
from googledocs.utils.errors import DocumentNotFoundError, InvalidCredentialError


@pytest.fixture
def configured_client(monkeypatch):
    """OAuth client credentials present in the environment."""
    monkeypatch.setenv("GOOGLE_OAUTH_CLIENT_ID", "id")
    monkeypatch.setenv("GOOGLE_OAUTH_CLIENT_SECRET", "secret")
    reload_oauth_config()


@pytest.fixture(autouse=True)
def no_pending_oob(monkeypatch):
    monkeypatch.setattr(auth_tools, "_pending_oob", None)


class TestDocTools:
    """Tests for the document tools."""

    def test_read_google_doc(self):
        """Test that the tool returns the document's plain text."""
        with patch("googledocs.server.doc_tools.get_client") as mock_get_client:
            mock_get_client.return_value.read_text.return_value = "Hello"
            result = doc_tools.read_google_doc.fn("abc")

        mock_get_client.return_value.read_text.assert_called_once_with("abc")
        assert result == "Hello"

    def test_read_google_doc_not_found(self):
        """Test that a missing document is reported, not raised."""
        with patch("googledocs.server.doc_tools.get_client") as mock_get_client:
            mock_get_client.return_value.read_text.side_effect = DocumentNotFoundError(
                "Document not found.", "abc"
            )
            result = doc_tools.read_google_doc.fn("abc")

        assert result == "Read doc failed: Document not found."

    def test_create_google_doc(self):
        """Test that the new document ID is reported."""
        with patch("googledocs.server.doc_tools.get_client") as mock_get_client:
            mock_get_client.return_value.create_document.return_value = {"documentId": "new"}
            result = doc_tools.create_google_doc.fn("Title")

        assert "ID: new" in result

    def test_insert_text_google_doc(self):
        """Test that inserts pass through index and revision."""
        with patch("googledocs.server.doc_tools.get_client") as mock_get_client:
            client = mock_get_client.return_value
            client.insert_text.return_value = {"writeControl": {"requiredRevisionId": "rev-2"}}
            result = doc_tools.insert_text_google_doc.fn("abc", "hello", index=3)

        client.insert_text.assert_called_once_with(
            "abc", "hello", index=3, required_revision_id=None
        )
        assert result == "Inserted 5 characters. Revision: rev-2"


class TestAuthTools:
    """Tests for the auth tools."""

    def test_status(self):
        """Test that the status tool prints the auth config."""
        result = auth_tools.google_auth_status.fn()
        assert "googledocs auth state: active" in result
        assert "oauth app: googledocs-test" in result

    def test_deauthorize(self, state):
        """Test that deauthorizing drops the stored token."""
        state.set_credential(Credentials(token="tok"))
        result = auth_tools.deauthorize_google.fn()

        assert "auth state: inactive" in result
        assert state.get_credential() is None

    def test_start_auth_without_client(self):
        """Test that missing client credentials are reported."""
        result = auth_tools.start_google_auth.fn()
        assert "OAuth client credentials not found" in result

    def test_start_auth(self, configured_client, state):
        """Test that the browser flow is started for the given account."""
        with patch("googledocs.server.auth_tools.authenticate") as authenticate:
            result = auth_tools.start_google_auth.fn(email="jenny@example.com")

        authenticate.assert_called_once_with(email="jenny@example.com")
        assert result.startswith("Authenticated.")

    def test_start_oob_returns_url(self, configured_client, app):
        """Test that the copy/paste flow hands back a URL instead of prompting."""
        pending = Mock(auth_url="https://accounts.google.com/auth?x=1")
        with (
            patch("googledocs.server.auth_tools.start_oob_flow", return_value=pending) as start,
            patch("googledocs.server.auth_tools.authenticate") as authenticate,
        ):
            result = auth_tools.start_google_auth.fn(email="jenny@example.com", use_oob=True)

        start.assert_called_once_with(app, email="jenny@example.com")
        authenticate.assert_not_called()
        assert "https://accounts.google.com/auth?x=1" in result
        assert auth_tools._pending_oob is pending

    def test_complete_auth(self, configured_client):
        """Test that the pasted code finishes the pending flow."""
        pending = Mock(auth_url="https://accounts.google.com/auth?x=1")
        with patch("googledocs.server.auth_tools.start_oob_flow", return_value=pending):
            auth_tools.start_google_auth.fn(use_oob=True)

        with patch("googledocs.server.auth_tools.complete_oob_auth") as complete:
            result = auth_tools.complete_google_auth.fn("4/code")

        complete.assert_called_once_with(pending, "4/code")
        assert result.startswith("Authenticated.")
        assert auth_tools._pending_oob is None

    def test_complete_auth_rejected_code_keeps_flow(self, configured_client):
        """Test that a rejected code is reported and the flow can be retried."""
        pending = Mock(auth_url="https://accounts.google.com/auth?x=1")
        with patch("googledocs.server.auth_tools.start_oob_flow", return_value=pending):
            auth_tools.start_google_auth.fn(use_oob=True)

        with patch(
            "googledocs.server.auth_tools.complete_oob_auth",
            side_effect=InvalidCredentialError("Authorization error. No access token obtained."),
        ):
            result = auth_tools.complete_google_auth.fn("bad")

        assert result.startswith("Authentication failed:")
        assert auth_tools._pending_oob is pending

    def test_complete_auth_without_start(self):
        """Test that completing without a pending flow is reported."""
        result = auth_tools.complete_google_auth.fn("4/code")
        assert "No authorization in progress" in result


class TestMain:

    def test_main_disables_console_prompts(self):
        """Test that the stdio server never prompts on the console."""
        with patch.object(server.mcp, "run") as run:
            server.main()

        run.assert_called_once_with(show_banner=False)
        assert get_oauth_config().console_prompts is False
