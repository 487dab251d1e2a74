# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the FastMCP server and registers one tool per entry in
#   tools/registry.py.  Each tool is a thin wrapper: it logs the call, hands
#   the arguments to the ToolDispatcher, and converts the returned envelope
#   into a FastMCP ToolResult.
#
# HOW IT WORKS (the flow):
#   1. An MCP client calls a tool by name (e.g., "list_budgets")
#   2. FastMCP routes the call to the matching KubecostTool.run()
#   3. The dispatcher validates arguments and calls the Kubecost API
#   4. The envelope comes back as text content, with isError preserved
#
# TOOLS ARE Tool SUBCLASSES, NOT @mcp.tool() FUNCTIONS:
#   Their `parameters` are the registry's JSON Schemas, not a function
#   signature.
#
# RUNNING THIS SERVER:
#   python main.py   (or the `kubecost-mcp` console script)
# =============================================================================

import json
import logging
import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.tools import Tool, ToolResult

from core.config import KubecostConfig
from core.kubecost_client import KubecostClient
from tools.dispatcher import ToolDispatcher, ToolEnvelope
from tools.registry import TOOLS, ToolSpec

SERVER_NAME = "kubecost-mcp"
SERVER_VERSION = "0.1.0"

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to its client over STDOUT.
# Anything printed to stdout would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for successful responses
#     - RED for error responses
#     - YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_RED = "\033[31m"      # Error responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

_LOG_FORMAT = "%(asctime)s [MCP] %(message)s"

# Keys whose values never reach the log.
_REDACTED_KEYS = {"slackWebhooks", "msTeamsWebhooks"}


def configure_logging(level: str = "INFO") -> None:
    """Send all log output to stderr at the requested level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _redact(arguments: dict[str, Any]) -> dict[str, Any]:
    redacted = {}
    for key, value in arguments.items():
        if key in _REDACTED_KEYS:
            redacted[key] = "***"
        elif isinstance(value, dict):
            redacted[key] = _redact(value)
        elif isinstance(value, list):
            redacted[key] = [_redact(v) if isinstance(v, dict) else v for v in value]
        else:
            redacted[key] = value
    return redacted


def _log_request(tool_name: str, arguments: dict[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in _redact(arguments).items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, envelope: ToolEnvelope) -> ToolEnvelope:
    """Log the envelope on one line (GREEN on success, RED on error)."""
    color = _RED if envelope.is_error else _GREEN
    compact = json.dumps(envelope.to_dict(), separators=(",", ":"))
    logging.info(f"{color}  ← {tool_name} response: {compact}{_RESET}")
    return envelope


# =============================================================================
# KubecostTool — one registry entry exposed over MCP
# =============================================================================
class KubecostTool(Tool):
    """MCP tool backed by a registry contract and the shared dispatcher."""

    def __init__(self, spec: ToolSpec, dispatcher: ToolDispatcher):
        super().__init__(
            name=spec.name,
            description=spec.description,
            parameters=spec.input_schema(),
        )
        self._dispatcher = dispatcher

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        arguments = arguments or {}
        _log_request(self.name, arguments)
        envelope = await self._dispatcher.dispatch(self.name, arguments)
        _log_response(self.name, envelope)
        return ToolResult(content=envelope.text, is_error=envelope.is_error)


# =============================================================================
# Server factory
# =============================================================================
def create_server(
    config: KubecostConfig, client: Optional[KubecostClient] = None
) -> FastMCP:
    """Build the Kubecost MCP server.

    Args:
        config: Connection settings, already validated.
        client: Pre-built client, shared by every MCP session.  Built from
                `config` when omitted.  Closing it is the caller's job;
                sessions come and go while the server keeps running.

    Returns:
        A FastMCP server with every registry tool registered.
    """
    if client is None:
        client = KubecostClient(config)
    dispatcher = ToolDispatcher(client)

    mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)
    for spec in TOOLS:
        mcp.add_tool(KubecostTool(spec, dispatcher))

    _log_status(
        f"Registered {len(TOOLS)} tools against {config.base_url} "
        f"({config.auth_mode} auth)"
    )
    return mcp
