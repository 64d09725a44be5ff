# =============================================================================
# tools/bridge.py  —  The Tool Invocation Bridge
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Turns every tool the server advertises into a BridgedTool:
#
#     id            the remote tool name (also the registry key)
#     description   the remote description ("" when missing)
#     input_schema  a pydantic model translated from the raw JSON Schema
#     execute       an async callable: arguments → normalized result
#
# HOW IT WORKS (the flow):
#   1. load_bridged_tools() asks the session for the tool listing
#   2. build_tool_registry() translates each schema (core/schema_translator)
#      and pairs it with an executor closure
#   3. The agent runtime validates the LLM's arguments against input_schema
#      and awaits execute(arguments)
#   4. execute() forwards to the remote call, then folds the response into
#      a single dict (core/responses)
#
# WHAT THE BRIDGE DOES NOT DO:
#   - It does not re-validate arguments (the runtime already did).
#   - It does not retry, time out or swallow remote errors: they are logged
#     with the tool name and re-raised as-is.
#
# LOGGING:
#   Requests in CYAN, status in YELLOW, responses in GREEN, same as the
#   server-side logs, so a terminal session reads as one conversation.
# =============================================================================

import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from core.models import (
    OptionalFieldPolicy,
    OversizedSchemaPolicy,
    ToolDescriptor,
    TranslationStats,
)
from core.responses import normalize_response
from core.schema_translator import SchemaTooLargeError, translate_tool_schema

logger = logging.getLogger(__name__)

# callRemote(toolName, arguments) → envelope
CallRemote = Callable[[str, dict[str, Any]], Awaitable[Any]]
Execute = Callable[[dict[str, Any]], Awaitable[Any]]

# ANSI color codes for terminal output
_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color


def _log_request(tool_name: str, arguments: dict[str, Any]) -> None:
    """Log an outgoing tool call with its arguments in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in arguments.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: Any) -> Any:
    """Log the normalized result as compact JSON in GREEN, then return it."""
    rendered = json.dumps(result, separators=(",", ":"), default=str)
    logger.info(f"{_GREEN}  ← {tool_name} response: {rendered}{_RESET}")
    return result


# =============================================================================
# BridgedTool — one registered entry
# =============================================================================
@dataclass(frozen=True)
class BridgedTool:
    id: str
    description: str
    input_schema: type[BaseModel]
    execute: Execute = field(repr=False)
    stats: TranslationStats = field(default_factory=TranslationStats, repr=False)


def make_executor(tool_name: str, call_remote: CallRemote) -> Execute:
    """Build the execute() closure for one remote tool."""

    async def execute(arguments: dict[str, Any]) -> Any:
        _log_request(tool_name, arguments)
        try:
            raw = await call_remote(tool_name, arguments)
        except Exception:
            logger.exception(f"Error executing tool {tool_name}")
            raise
        return _log_response(tool_name, normalize_response(raw))

    return execute


def build_tool(
    descriptor: ToolDescriptor,
    call_remote: CallRemote,
    policy: OptionalFieldPolicy = OptionalFieldPolicy.NULLABLE,
) -> BridgedTool:
    """Translate one descriptor and pair it with its executor.

    Raises:
        SchemaTooLargeError: if the descriptor's schema is over the ceiling.
    """
    input_schema, stats = translate_tool_schema(descriptor.name, descriptor.raw_schema, policy)
    return BridgedTool(
        id=descriptor.name,
        description=descriptor.description or "",
        input_schema=input_schema,
        execute=make_executor(descriptor.name, call_remote),
        stats=stats,
    )


def build_tool_registry(
    descriptors: Iterable[ToolDescriptor],
    call_remote: CallRemote,
    *,
    optional_fields: OptionalFieldPolicy = OptionalFieldPolicy.NULLABLE,
    on_oversized: OversizedSchemaPolicy = OversizedSchemaPolicy.SKIP,
) -> dict[str, BridgedTool]:
    """Bridge every descriptor and index the results by tool id.

    With ``on_oversized=SKIP`` a tool whose schema is too large is logged
    and left out.  With ``ABORT`` the error propagates and nothing is
    returned.  Any other translation error always propagates.
    """
    registry: dict[str, BridgedTool] = {}
    for descriptor in descriptors:
        try:
            tool = build_tool(descriptor, call_remote, optional_fields)
        except SchemaTooLargeError as exc:
            if on_oversized is OversizedSchemaPolicy.ABORT:
                logger.error(f"Schema for tool {descriptor.name} is too large: {exc}")
                raise
            logger.warning(f"Skipping tool {descriptor.name}: {exc}")
            continue

        if tool.id in registry:
            logger.warning(f"Duplicate tool name {tool.id}; keeping the later definition")
        registry[tool.id] = tool
    return registry


async def load_bridged_tools(
    session,
    *,
    optional_fields: OptionalFieldPolicy = OptionalFieldPolicy.NULLABLE,
    on_oversized: OversizedSchemaPolicy = OversizedSchemaPolicy.SKIP,
) -> dict[str, BridgedTool]:
    """Discover the session's tools and bridge them.

    ``session`` needs ``list_tools()`` and ``call_tool(name, arguments)``
    (see tools/mcp_session.McpSession).  Discovery failures are logged and
    re-raised.
    """
    try:
        descriptors = await session.list_tools()
    except Exception:
        logger.exception("Error getting tools from the tool server")
        raise

    _log_status(f"Discovered {len(descriptors)} tools")
    return build_tool_registry(
        descriptors,
        session.call_tool,
        optional_fields=optional_fields,
        on_oversized=on_oversized,
    )
