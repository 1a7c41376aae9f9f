"""Document-related MCP tools."""
from typing import Optional

from .main import mcp, get_client
from ..utils.errors import format_error, GoogleDocsError


@mcp.tool()
def read_google_doc(document_id: str) -> str:
    """
    Read the plain text of a Google Doc.
    Args:
        document_id: The document ID or its full URL.
    """
    try:
        return get_client().read_text(document_id)
    except GoogleDocsError as e:
        return format_error("Read doc", e)
    except Exception as e:
        return f"Read doc failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def create_google_doc(title: str) -> str:
    """
    Create a new, empty Google Doc.
    Args:
        title: The name of the new document.
    """
    try:
        doc = get_client().create_document(title)
        return f"Document created successfully. ID: {doc.get('documentId')}"
    except GoogleDocsError as e:
        return format_error("Create doc", e)
    except Exception as e:
        return f"Create doc failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def insert_text_google_doc(
    document_id: str,
    text: str,
    index: int = 1,
    required_revision_id: Optional[str] = None,
) -> str:
    """
    Insert text into the body of a Google Doc.
    Args:
        document_id: The document ID or its full URL.
        text: The text to insert.
        index: Position in the body to insert at (1 is the start).
        required_revision_id: Optional revision the edit must apply to.
    """
    try:
        result = get_client().insert_text(
            document_id, text, index=index, required_revision_id=required_revision_id
        )
        revision = result.get('writeControl', {}).get('requiredRevisionId')
        return f"Inserted {len(text)} characters. Revision: {revision}"
    except GoogleDocsError as e:
        return format_error("Insert text", e)
    except Exception as e:
        return f"Insert text failed: Unexpected error ({type(e).__name__}: {e})"
