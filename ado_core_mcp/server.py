"""Main MCP server entry point."""
import logging
import sys

from . import config
from .config import mcp


def main():
    """Entry point for the MCP server."""
    # stdout belongs to the stdio transport
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config.check_settings()

    # Import all modules to trigger tool registration
    from . import tools  # noqa: F401

    if config.ADO_MCP_TRANSPORT == "streamable-http":
        mcp.run(
            transport="streamable-http",
            host=config.ADO_MCP_HOST,
            port=config.mcp_port(),
            path="/mcp",
        )
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
