"""Google Docs client.

Raw REST request helpers plus a small DocsClient facade over them.
"""
from .api_request import DocsRequest, request_build, request_make, response_process
from .documents import DocsClient, as_id

__all__ = [
    'DocsClient',
    'DocsRequest',
    'as_id',
    'request_build',
    'request_make',
    'response_process',
]
