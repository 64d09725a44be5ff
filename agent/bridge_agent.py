# =============================================================================
# agent/bridge_agent.py  —  Google ADK Agent over the bridged tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Plugs the bridged registry (tools/bridge.py) into a Google ADK agent.
#
#   ┌─────────────────┐   declaration   ┌─────────────────────┐
#   │  LLM (LiteLlm)  │◀────────────────│  BridgedAdkTool     │
#   │                 │────────────────▶│  validate → execute │
#   └─────────────────┘    arguments    └─────────────────────┘
#                                                 │
#                                                 ▼
#                                       ┌─────────────────────┐
#                                       │  McpSession         │
#                                       │  (remote server)    │
#                                       └─────────────────────┘
#
# THE ADAPTER'S JOB:
#   1. Declare the tool to the LLM using the translated pydantic model's
#      JSON schema.
#   2. Validate the LLM's arguments against that model.  An invalid call is
#      answered with {"error": ...} so the model can correct itself.
#   3. Serialize the validated arguments by alias (the remote tool's own
#      property names) and await the bridged execute().
# =============================================================================

import logging
from typing import Any, Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.base_tool import BaseTool
from google.genai import types
from pydantic import ValidationError

from agent.prompt import GITHUB_AGENT_PROMPT
from core.config import BridgeSettings
from core.models import OptionalFieldPolicy
from tools.bridge import BridgedTool, load_bridged_tools

logger = logging.getLogger(__name__)


class BridgedAdkTool(BaseTool):
    """ADK tool backed by one BridgedTool."""

    def __init__(self, bridged: BridgedTool, *, omit_unset: bool = False):
        super().__init__(name=bridged.id, description=bridged.description)
        self.bridged = bridged
        # Under the optional-with-default policy, keys the LLM left out stay
        # out unless they carry a declared default.
        self.omit_unset = omit_unset

    def _get_declaration(self) -> Optional[types.FunctionDeclaration]:
        return types.FunctionDeclaration(
            name=self.name,
            description=self.description,
            parameters_json_schema=self.bridged.input_schema.model_json_schema(),
        )

    def prepare_arguments(self, args: dict[str, Any]) -> dict[str, Any]:
        """Validate raw LLM arguments and dump them with wire names.

        Raises:
            pydantic.ValidationError: if ``args`` doesn't match input_schema.
        """
        model = self.bridged.input_schema
        validated = model.model_validate(args)
        exclude = set()
        if self.omit_unset:
            exclude = {
                name
                for name, info in model.model_fields.items()
                if name not in validated.model_fields_set and info.default is None
            }
        return validated.model_dump(mode="json", by_alias=True, exclude=exclude)

    async def run_async(self, *, args: dict[str, Any], tool_context) -> Any:
        try:
            arguments = self.prepare_arguments(args)
        except ValidationError as exc:
            logger.warning(f"Invalid arguments for tool {self.name}: {exc}")
            return {"error": f"Invalid arguments for tool '{self.name}'.", "details": str(exc)}
        return await self.bridged.execute(arguments)


def create_agent(tools: dict[str, BridgedTool], settings: BridgeSettings) -> Agent:
    """Create the GitHub assistant agent over an already-bridged registry."""
    omit_unset = settings.optional_fields is OptionalFieldPolicy.OPTIONAL_DEFAULT
    return Agent(
        name="github_agent",
        model=LiteLlm(model=settings.model),
        instruction=GITHUB_AGENT_PROMPT,
        tools=[BridgedAdkTool(tool, omit_unset=omit_unset) for tool in tools.values()],
    )


async def create_github_agent(session, settings: BridgeSettings) -> Agent:
    """Discover the session's tools, bridge them and build the agent."""
    logger.info("getting tools from the tool server")
    tools = await load_bridged_tools(
        session,
        optional_fields=settings.optional_fields,
        on_oversized=settings.on_oversized,
    )
    logger.info(f"tools count: {len(tools)}")
    return create_agent(tools, settings)
