"""Unit tests for raw Docs API request building."""
from unittest.mock import Mock, patch

import pytest
from google.oauth2.credentials import Credentials

from googledocs.auth.google_auth import TokenAuth
from googledocs.client.api_request import (
    DOCS_BASE_URL,
    request_build,
    request_make,
    response_process,
)
from googledocs.utils.errors import DocumentNotFoundError, GoogleDocsError


def mock_response(status=200, payload=None, content=b"{}"):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.content = content
    response.text = content.decode()
    response.json.return_value = payload if payload is not None else {}
    return response


class TestRequestBuild:

    def test_path_template_and_key(self, state):
        """Test that path parameters fill the template and the API key is added."""
        req = request_build(
            path="v1/documents/{documentId}",
            params={"documentId": "15mYX6JM", "suggestionsViewMode": "PREVIEW"},
            state=state,
        )

        assert req.method == "GET"
        assert req.url == f"{DOCS_BASE_URL}/v1/documents/15mYX6JM"
        assert req.params == {"suggestionsViewMode": "PREVIEW", "key": "default-key"}
        assert req.token is None

    def test_explicit_key_wins(self, state):
        """Test that an explicit key overrides the configured one."""
        req = request_build(path="v1/documents/abc", key="other-key", state=state)
        assert req.params["key"] == "other-key"

    def test_token_suppresses_key(self, state):
        """Test that a token request carries no API key."""
        token = TokenAuth(Credentials(token="tok"))
        req = request_build(
            method="post", path="v1/documents", body={"title": "t"}, token=token, state=state
        )

        assert req.method == "POST"
        assert "key" not in req.params
        assert req.token is token
        assert req.body == {"title": "t"}

    def test_no_key_configured(self, state):
        """Test that no key parameter is sent when none is configured."""
        state.set_api_key(None)
        req = request_build(path="v1/documents/abc", state=state)
        assert req.params == {}

    def test_batch_update_path(self, state):
        """Test that the batchUpdate suffix survives template expansion."""
        req = request_build(
            method="POST",
            path="v1/documents/{documentId}:batchUpdate",
            params={"documentId": "abc"},
            state=state,
        )
        assert req.url == f"{DOCS_BASE_URL}/v1/documents/abc:batchUpdate"

    def test_reserved_expansion_keeps_slashes(self, state):
        """Reserved expansion leaves slashes unescaped."""
        req = request_build(
            path="v1/{+name}", params={"name": "documents/abc"}, state=state
        )
        assert req.url == f"{DOCS_BASE_URL}/v1/documents/abc"

    def test_simple_expansion_escapes(self, state):
        """Simple expansion percent-encodes slashes."""
        req = request_build(
            path="v1/documents/{documentId}", params={"documentId": "a/b"}, state=state
        )
        assert req.url.endswith("/v1/documents/a%2Fb")

    def test_missing_path_parameter(self, state):
        """Test that a missing template parameter is a ValueError."""
        with pytest.raises(ValueError, match="documentId"):
            request_build(path="v1/documents/{documentId}", state=state)

    def test_uses_global_api_key(self):
        """Test that the global state's key is used by default."""
        req = request_build(path="v1/documents/abc")
        assert req.params["key"] == "default-key"


class TestRequestMake:

    def test_sends_with_session(self, state):
        """Test that the request goes through the given session."""
        session = Mock()
        token = TokenAuth(Credentials(token="tok"))
        req = request_build(
            method="POST", path="v1/documents", body={"title": "x"}, token=token, state=state
        )

        result = request_make(req, session=session, timeout=30)

        assert result is session.request.return_value
        session.request.assert_called_once_with(
            "POST",
            f"{DOCS_BASE_URL}/v1/documents",
            params={},
            json={"title": "x"},
            auth=token,
            timeout=30,
        )

    def test_temporary_session_is_closed(self, state):
        """Test that a session opened for a single call is closed afterwards."""
        req = request_build(path="v1/documents/abc", state=state)

        with patch("googledocs.client.api_request.requests.Session") as session_cls:
            result = request_make(req)

        session = session_cls.return_value.__enter__.return_value
        assert result is session.request.return_value
        session_cls.return_value.__exit__.assert_called_once()


class TestResponseProcess:

    def test_ok_returns_json(self):
        """Test that a successful response is decoded."""
        response = mock_response(payload={"documentId": "abc"})
        assert response_process(response) == {"documentId": "abc"}

    def test_empty_body(self):
        """Test that an empty body decodes to an empty dict."""
        assert response_process(mock_response(content=b"")) == {}

    def test_not_found(self):
        """Test that 404 maps to DocumentNotFoundError with the document ID."""
        with pytest.raises(DocumentNotFoundError) as exc_info:
            response_process(mock_response(status=404), document_id="abc")
        assert exc_info.value.document_id == "abc"

    def test_other_status_includes_api_message(self):
        """Test that the API's error message is kept."""
        response = mock_response(
            status=400,
            payload={"error": {"message": "Invalid requests[0].insertText"}},
            content=b'{"error": {}}',
        )
        with pytest.raises(GoogleDocsError, match="HTTP 400.*insertText"):
            response_process(response)
