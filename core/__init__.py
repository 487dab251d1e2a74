# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains everything that talks to Kubecost: connection
# configuration, the request models and the async HTTP client.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP machinery.  The
#   client can be driven from a plain asyncio script.
# =============================================================================
