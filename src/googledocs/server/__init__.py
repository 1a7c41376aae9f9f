"""googledocs MCP Server."""

from .main import mcp, get_client

from . import auth_tools
from . import doc_tools
from ..auth.oauth_config import get_oauth_config

__all__ = ["mcp", "get_client", "main"]


def main():
    """Entry point for the googledocs MCP server."""
    # stdio carries the MCP protocol; auth flows must not prompt on it
    get_oauth_config().console_prompts = False
    mcp.run(show_banner=False)
