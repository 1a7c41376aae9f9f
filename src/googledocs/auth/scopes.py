"""
Google OAuth Scopes for googledocs.

This module defines the OAuth scopes used when requesting Drive and Docs access.
"""

from typing import List, Sequence, Union

# Identity scope, always requested so a token can be cached per user
USERINFO_EMAIL_SCOPE = "https://www.googleapis.com/auth/userinfo.email"

# Google Drive scopes
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"

DRIVE_SCOPES = [DRIVE_SCOPE, DRIVE_READONLY_SCOPE, DRIVE_FILE_SCOPE]

# Google Docs scopes
DOCS_READONLY_SCOPE = "https://www.googleapis.com/auth/documents.readonly"
DOCS_WRITE_SCOPE = "https://www.googleapis.com/auth/documents"

DOCS_SCOPES = [DOCS_READONLY_SCOPE, DOCS_WRITE_SCOPE]

DEFAULT_SCOPES = [DRIVE_SCOPE]


def normalize_scopes(scopes: Union[str, Sequence[str], None]) -> List[str]:
    """
    Turn a scope or list of scopes into a de-duplicated list that includes
    the userinfo.email scope.

    Args:
        scopes: A single scope string, a sequence of scopes, or None.

    Returns:
        List of unique scopes, in first-seen order.
    """
    if scopes is None:
        scopes = DEFAULT_SCOPES
    elif isinstance(scopes, str):
        scopes = [scopes]
    return list(dict.fromkeys(list(scopes) + [USERINFO_EMAIL_SCOPE]))
