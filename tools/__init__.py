# =============================================================================
# tools/__init__.py
# =============================================================================
# This package turns Kubecost client calls into MCP tools.
#
#   registry.py   → one contract per tool (name, description, input model)
#   dispatcher.py → validates arguments, calls the client, builds envelopes
#   mcp_server.py → registers the tools with FastMCP
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT interpret cost data (Kubecost's JSON is passed through)
#   - They do NOT retry, cache or paginate
# =============================================================================
