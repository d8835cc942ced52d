"""MCP server entry point for codequery.

Importing this module registers every tool on the shared FastMCP instance.
"""

from codequery.config import Settings
from codequery.mcp_server import tools  # noqa: F401
from codequery.mcp_server._shared import configure_server, mcp
from codequery.utils.logger import configure_logging, logger


def create_server(settings: Settings | None = None):
    """Configure logging and the corpus registry, then return the FastMCP app."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    configure_server(settings)
    logger.info(f"codequery server using corpus {settings.corpus_path}")
    return mcp


def main(settings: Settings | None = None) -> None:
    """Run the server over stdio."""
    create_server(settings).run()


if __name__ == "__main__":
    main()
