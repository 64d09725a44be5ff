# =============================================================================
# tools/mcp_session.py  —  The Tool Server Session (discovery + remote calls)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Wraps a FastMCP Client into the two services the bridge consumes:
#
#     list_tools()               → list[ToolDescriptor]
#     call_tool(name, arguments) → raw response envelope (a plain dict)
#
# ONE SESSION, PASSED EXPLICITLY:
#   The session is created once from BridgeSettings and handed to whoever
#   needs it (load_bridged_tools, the agent factory).  There is no module-level
#   client.  Use it as an async context manager so the transport is opened
#   and closed around the agent's lifetime:
#
#       async with McpSession.from_settings(settings) as session:
#           tools = await load_bridged_tools(session)
#
# TRANSPORTS:
#   - MCP_SERVER_URL set     → streamable HTTP, with the session id sent as
#                              a "sessionId" cookie when one is configured
#   - MCP_SERVER_COMMAND set → stdio subprocess
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any

from fastmcp import Client
from fastmcp.client.transports import StdioTransport, StreamableHttpTransport

from core.config import BridgeSettings, ConfigError
from core.models import ToolDescriptor

logger = logging.getLogger(__name__)


def build_transport(settings: BridgeSettings):
    """Pick the FastMCP transport described by the settings."""
    if settings.server_url:
        headers = {}
        if settings.session_id:
            headers["Cookie"] = f"sessionId={settings.session_id}"
        return StreamableHttpTransport(settings.server_url, headers=headers)
    if settings.server_command:
        command, *args = settings.server_command
        return StdioTransport(command=command, args=list(args))
    raise ConfigError("No tool server configured (need a URL or a command).")


def descriptor_from_tool(tool: Any) -> ToolDescriptor:
    """Convert an MCP ``Tool`` (or its dict form) into a ToolDescriptor."""
    if isinstance(tool, Mapping):
        return ToolDescriptor.from_mapping(tool)
    return ToolDescriptor(
        name=tool.name,
        description=tool.description or "",
        raw_schema=tool.inputSchema or {},
    )


class McpSession:
    """Discovery and remote-call service backed by one FastMCP client."""

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_settings(cls, settings: BridgeSettings) -> "McpSession":
        return cls(Client(build_transport(settings)))

    async def __aenter__(self) -> "McpSession":
        logger.info("establishing session")
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.__aexit__(exc_type, exc, tb)

    async def list_tools(self) -> list[ToolDescriptor]:
        tools = await self._client.list_tools()
        return [descriptor_from_tool(tool) for tool in tools]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Call a remote tool and return its envelope as a plain dict.

        Errors raised by the client propagate unchanged.  A tool-level error
        (``isError``) is not raised here; its text parts come back like any
        other response.
        """
        result = await self._client.call_tool_mcp(name, arguments)
        if result is None:
            return None
        if hasattr(result, "model_dump"):
            return result.model_dump(mode="json", by_alias=True, exclude_none=True)
        return result
