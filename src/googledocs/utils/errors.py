"""Custom exceptions for googledocs.

This module provides structured error handling with specific exception types
for different failure scenarios. All exceptions inherit from GoogleDocsError.
"""
from typing import Optional, Any


class GoogleDocsError(Exception):
    """Base exception for all googledocs errors.

    Attributes:
        message: Human-readable error description.
        document_id: Optional document ID related to the error.
    """

    def __init__(self, message: str, document_id: Optional[str] = None) -> None:
        self.message = message
        self.document_id = document_id
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message, optionally including document ID."""
        if self.document_id:
            return f"{self.message} (document: {self.document_id})"
        return self.message


class AuthenticationError(GoogleDocsError):
    """Raised when authentication fails or token is expired."""
    pass


class InvalidCredentialError(AuthenticationError):
    """Raised when an authorization flow hands back an unusable credential."""
    pass


class ConfigConflictError(GoogleDocsError):
    """Raised when auth configuration receives mutually exclusive arguments."""
    pass


class DocumentNotFoundError(GoogleDocsError):
    """Raised when a requested document doesn't exist or was deleted."""
    pass


class PermissionDeniedError(GoogleDocsError):
    """Raised when access to a document is denied."""
    pass


class QuotaExceededError(GoogleDocsError):
    """Raised when API rate limit or quota is exceeded."""
    pass


def _error_detail(response: Any) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    error = payload.get("error", {}) if isinstance(payload, dict) else {}
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return response.text


def handle_http_error(response: Any, document_id: Optional[str] = None) -> GoogleDocsError:
    """Convert a failed requests.Response to a specific exception.

    Args:
        response: The non-2xx response from the Docs API.
        document_id: Optional document ID for context.

    Returns:
        An appropriate GoogleDocsError subclass.
    """
    try:
        status = response.status_code
    except AttributeError:
        return GoogleDocsError(f"API error: {str(response)}", document_id)

    if status == 401:
        return AuthenticationError(
            "Authentication failed. Please re-authenticate with authenticate().",
            document_id
        )
    elif status == 403:
        return PermissionDeniedError(
            "Access denied. Check document sharing settings or request access.",
            document_id
        )
    elif status == 404:
        return DocumentNotFoundError(
            "Document not found. It may have been deleted or moved.",
            document_id
        )
    elif status == 429:
        return QuotaExceededError(
            "API quota exceeded. Please wait a moment and try again.",
            document_id
        )
    else:
        return GoogleDocsError(
            f"API error (HTTP {status}): {_error_detail(response)}", document_id
        )


def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Create", "Update").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, GoogleDocsError):
        return f"{action} failed: {error.message}"
    return f"{action} failed: {str(error)}"
