"""MCP tool modules for codequery.

Each module defines _impl functions (testable logic) and @mcp.tool
registrations (MCP-facing wrappers). Importing a module triggers tool
registration on the shared `mcp` FastMCP instance from _shared.py.
"""

from codequery.mcp_server.tools.corpus import _manage_corpus_impl  # noqa: F401
from codequery.mcp_server.tools.query import (  # noqa: F401
    _list_filter_categories_impl,
    _query_classes_impl,
    _query_models_impl,
    _query_routes_impl,
    _query_views_impl,
)
