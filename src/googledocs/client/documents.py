"""Document operations for the Docs API."""
import logging
import re
from typing import Any, Optional

import requests

from ..auth.google_auth import produce_auth_token
from ..auth.state import AuthState
from .api_request import request_build, request_make, response_process

logger = logging.getLogger(__name__)

_DOC_URL_RE = re.compile(r"/d/([a-zA-Z0-9_-]+)")


def as_id(url_or_id: str) -> str:
    """Extract a document ID from a Docs URL; plain IDs pass through.

    Args:
        url_or_id: e.g. "https://docs.google.com/document/d/<id>/edit" or "<id>".

    Returns:
        The document ID.
    """
    match = _DOC_URL_RE.search(url_or_id)
    if match:
        return match.group(1)
    if url_or_id.startswith("http"):
        raise ValueError(f"Could not find a document ID in URL: {url_or_id}")
    return url_or_id


class DocsClient:
    """Google Docs client built on raw REST requests.

    Each call asks the auth state for a token; when auth is inactive the
    configured API key is sent instead.
    """

    def __init__(
        self,
        state: Optional[AuthState] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.state = state
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        """Close the HTTP session if this client opened it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "DocsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _call(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        body: Optional[Any] = None,
        document_id: Optional[str] = None,
    ) -> dict[str, Any]:
        req = request_build(
            method=method,
            path=path,
            params=params,
            body=body,
            token=produce_auth_token(self.state),
            state=self.state,
        )
        response = request_make(req, session=self.session)
        return response_process(response, document_id)

    def get_document(self, document_id: str) -> dict[str, Any]:
        """Fetch the full document resource.

        Args:
            document_id: The document ID or URL.

        Returns:
            Raw JSON resource from Docs API.
        """
        document_id = as_id(document_id)
        return self._call(
            "GET",
            "v1/documents/{documentId}",
            params={"documentId": document_id},
            document_id=document_id,
        )

    def create_document(self, title: str) -> dict[str, Any]:
        """Create an empty document."""
        doc = self._call("POST", "v1/documents", body={"title": title})
        logger.info(f"Created document '{title}' ({doc.get('documentId')})")
        return doc

    def batch_update(
        self,
        document_id: str,
        update_requests: list[dict[str, Any]],
        required_revision_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Apply a list of update requests to a document.

        Args:
            document_id: The document ID or URL.
            update_requests: Docs API request objects, e.g. {"insertText": {...}}.
            required_revision_id: Fail if the document has moved past this revision.

        Returns:
            The batchUpdate response.
        """
        document_id = as_id(document_id)
        body: dict[str, Any] = {"requests": update_requests}
        if required_revision_id:
            body["writeControl"] = {"requiredRevisionId": required_revision_id}
        return self._call(
            "POST",
            "v1/documents/{documentId}:batchUpdate",
            params={"documentId": document_id},
            body=body,
            document_id=document_id,
        )

    def insert_text(
        self,
        document_id: str,
        text: str,
        index: int = 1,
        segment_id: str = "",
        required_revision_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Insert text at an index of a document segment (body by default)."""
        request = {
            "insertText": {
                "location": {"segmentId": segment_id, "index": index},
                "text": text,
            }
        }
        return self.batch_update(
            document_id, [request], required_revision_id=required_revision_id
        )

    def extract_text(self, content: list) -> str:
        """Recursively extract text from a list of structural elements.

        Args:
            content: Body content list from a document resource.

        Returns:
            Extracted text string.
        """
        text = ""
        for item in content:
            if 'paragraph' in item:
                for elem in item['paragraph'].get('elements', []):
                    if 'textRun' in elem:
                        text += elem['textRun']['content']
            elif 'table' in item:
                for row in item['table']['tableRows']:
                    for cell in row['tableCells']:
                        text += self.extract_text(cell['content']) + " | "
                    text += "\n"
        return text

    def read_text(self, document_id: str) -> str:
        """Fetch a document and return its body as plain text."""
        doc = self.get_document(document_id)
        return self.extract_text(doc.get('body', {}).get('content', []))
