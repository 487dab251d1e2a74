# =============================================================================
# main.py  —  Entry Point for the Kubecost MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py        (or: kubecost-mcp)
#
# WHAT HAPPENS:
#   1. Loads a .env file if one exists (real environment variables win)
#   2. Reads KUBECOST_* settings into a KubecostConfig
#   3. Opens one KubecostClient and builds the FastMCP server around it
#   4. Serves MCP over stdio until the client disconnects
#   5. Closes the HTTP client once the server has stopped
#
#   If credentials are missing, the process logs why and exits with
#   status 1 before any tool is registered.
# =============================================================================

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from core.config import ConfigError, KubecostConfig, load_config
from core.kubecost_client import KubecostClient
from tools.mcp_server import configure_logging, create_server


async def serve(config: KubecostConfig) -> None:
    """Run the server on stdio; the HTTP client lives as long as the server."""
    async with KubecostClient(config) as client:
        mcp = create_server(config, client=client)
        logging.info("Kubecost MCP server started")
        await mcp.run_async()


def main() -> None:
    load_dotenv()
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    try:
        config = load_config()
    except ConfigError as e:
        logging.error(f"Failed to start Kubecost MCP server: {e}")
        sys.exit(1)

    asyncio.run(serve(config))


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
