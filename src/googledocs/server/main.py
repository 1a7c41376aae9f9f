"""MCP Server initialization."""

from fastmcp import FastMCP
from ..client import DocsClient
from typing import Optional

# Initialize MCP Server
mcp = FastMCP("googledocs")

# Global client, initialized lazily
_client: Optional[DocsClient] = None


def get_client() -> DocsClient:
    """Get or create the global DocsClient instance.

    The client uses the process-wide auth state, so auth tools and doc tools
    see the same configuration.
    """
    global _client
    if not _client:
        _client = DocsClient()
    return _client
