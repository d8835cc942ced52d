"""FastMCP server exposing the codequery tools."""

from codequery.mcp_server._shared import mcp
from codequery.mcp_server.server import create_server, main

__all__ = ["create_server", "main", "mcp"]
