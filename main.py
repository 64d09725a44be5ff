# =============================================================================
# main.py  —  Entry Point for the GitHub Agent over bridged MCP tools
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                      # interactive
#   uv run python main.py "What are some of the interesting issues on the tensorflow repo?"
#
# WHAT HAPPENS:
#   1. Reads settings from the environment / .env (core/config.py)
#   2. Opens ONE session to the tool server (tools/mcp_session.py)
#   3. Discovers the server's tools and bridges them (tools/bridge.py)
#   4. Creates the Google ADK agent over those tools (agent/bridge_agent.py)
#   5. Sends the question(s) to the agent and prints the final answer
# =============================================================================

import asyncio
import logging
import sys

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.bridge_agent import create_github_agent
from core.config import BridgeSettings
from tools.mcp_session import McpSession

APP_NAME = "github_agent"
USER_ID = "demo_user"


def configure_logging(level: str) -> None:
    # Logs go to STDERR so they never mix with a stdio transport or the answer.
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


async def ask(runner: Runner, session_id: str, question: str) -> str:
    """Send one question through the runner and return the last text part."""
    user_message = types.Content(role="user", parts=[types.Part(text=question)])
    final_response = ""

    async for event in runner.run_async(
        user_id=USER_ID,
        session_id=session_id,
        new_message=user_message,
    ):
        if event.content and event.content.parts:
            for part in event.content.parts:
                if part.text:
                    final_response = part.text
                if part.function_call:
                    print(f"  🔧 Calling tool: {part.function_call.name}")

    return final_response


async def run_agent(question: str | None = None) -> None:
    settings = BridgeSettings.from_env()
    configure_logging(settings.log_level)

    async with McpSession.from_settings(settings) as mcp_session:
        logging.info("creating github agent")
        agent = await create_github_agent(mcp_session, settings)
        logging.info("github agent created")

        session_service = InMemorySessionService()
        runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
        session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

        if question:
            print(await ask(runner, session.id, question))
            return

        print("💬 Ask the agent about GitHub!  (Type 'quit' to exit)")
        while True:
            try:
                user_input = input("\n🧑 You: ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\n👋 Goodbye!")
                break

            if user_input.lower() in ("quit", "exit", "q"):
                print("\n👋 Goodbye!")
                break
            if not user_input:
                continue

            final_response = await ask(runner, session.id, user_input)
            if final_response:
                print(f"\n🤖 Agent:\n\n{final_response}")
            else:
                print("\n⚠️  No response generated. The agent may have encountered an error.")


def cli() -> None:
    asyncio.run(run_agent(" ".join(sys.argv[1:]) or None))


if __name__ == "__main__":
    cli()
