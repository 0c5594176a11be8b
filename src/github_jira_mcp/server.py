"""MCP server wiring for github-jira-mcp.

Lists the GitHub and Jira tools, dispatches calls, and exposes non-secret status resources.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

try:
    from mcp.server import Server
    from mcp.types import Resource, TextContent, Tool
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from . import __version__
from .errors import ToolError, to_error_result, tool_error_to_result
from .tools import TOOL_METADATA, close_runtime, dispatch_tool, initialize_runtime_from_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "github-jira-mcp"
STATUS_URI = "github-jira-mcp://server-status"
CAPABILITIES_URI = "github-jira-mcp://capabilities"

server = Server(
    SERVER_NAME,
    version=__version__,
    instructions="Tools for interacting with GitHub (pull requests, diffs, issues, comments) and Jira "
    "(issues, development status, edits, comments).",
)


def _resources() -> list[Resource]:
    return [
        Resource(
            uri=STATUS_URI,
            name="Server Status",
            description="Non-secret server configuration",
        ),
        Resource(
            uri=CAPABILITIES_URI,
            name="Capabilities",
            description="Available tools grouped by upstream service",
        ),
    ]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    tools: list[Tool] = []
    for tool_name, metadata in TOOL_METADATA.items():
        tools.append(
            Tool(
                name=tool_name,
                description=metadata["description"],
                inputSchema=metadata["inputSchema"],
            )
        )

    logger.info("Listed %s tools", len(tools))
    return tools


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a tool and return its payload as a single TextContent.

    Errors are re-raised so the SDK reports them as isError results with the message text.
    """
    if not isinstance(arguments, dict):
        arguments = {}

    logger.info("Tool called: %s", name)

    try:
        text = await dispatch_tool(name, arguments)
    except ToolError as err:
        logger.error("Tool %s failed: [%s] %s", name, err.code, err.message)
        if err.hint:
            # The SDK only reports str(err), so fold the hint into the message.
            raise ToolError(
                f"{err.message}. {err.hint}",
                code=err.code,
                hint=err.hint,
                status_code=err.status_code,
            ) from err
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Tool %s crashed", name)
        raise ToolError("Tool execution failed") from exc

    return [TextContent(type="text", text=text)]


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return _resources()


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    uri_s = uri if isinstance(uri, str) else str(uri)

    if uri_s == CAPABILITIES_URI:
        caps = {
            "server": SERVER_NAME,
            "version": __version__,
            "services": {
                "github": sorted(n for n in TOOL_METADATA if n.startswith("github_")),
                "jira": sorted(n for n in TOOL_METADATA if n.startswith("jira_")),
            },
        }
        return json.dumps(caps, indent=2)

    if uri_s == STATUS_URI:
        status: dict[str, Any] = {
            "server": SERVER_NAME,
            "version": __version__,
            "tools_available": len(TOOL_METADATA),
            "tool_names": sorted(TOOL_METADATA.keys()),
            "configured": False,
        }
        try:
            runtime = initialize_runtime_from_env()
            status["configured"] = True
            status["github"] = {
                "api_base_url": runtime.config.github.api_base_url,
                "token_configured": runtime.github.has_token,
            }
            status["jira"] = {
                "instance_url": runtime.jira.instance_url,
                "token_configured": runtime.jira.has_token,
            }
        except ToolError as err:
            status["error"] = tool_error_to_result(err)

        return json.dumps(status, indent=2)

    return json.dumps(to_error_result(code="NotFound", message="Unknown resource"), indent=2)


async def run_server() -> None:
    """Run the server over stdio."""
    # Fail fast on invalid host configuration.
    try:
        _ = initialize_runtime_from_env()
    except ToolError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise

    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await close_runtime()


async def test_server() -> None:
    """Lightweight self-test to ensure tool/resource listing works."""
    # Avoid calling decorated handlers directly; just validate we can construct
    # Tool/Resource objects.
    _ = [
        Tool(name=name, description=meta["description"], inputSchema=meta["inputSchema"])
        for name, meta in TOOL_METADATA.items()
    ]
    _ = _resources()
    logger.info("Self-test passed: %s tools, %s resources", len(TOOL_METADATA), len(_resources()))
