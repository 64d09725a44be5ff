# =============================================================================
# core/config.py  —  Settings from the environment
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads every knob the bridge needs from environment variables (a .env
#   file is loaded first) into one immutable BridgeSettings object.  That
#   object is passed explicitly to whoever needs it; nothing reads os.environ
#   behind your back after startup.
#
# VARIABLES:
#   MCP_SERVER_URL          Streamable-HTTP endpoint of the tool server
#   MCP_SERVER_COMMAND      Command line to launch a stdio server (used when
#                           no URL is set), e.g. "uv run python server.py"
#   MCP_SESSION_ID          Session identifier, sent as a sessionId cookie
#                           (required with MCP_SERVER_URL)
#   AGENT_MODEL             LiteLLM model string
#   BRIDGE_OPTIONAL_FIELDS  "nullable" (default) or "optional"
#   BRIDGE_ON_OVERSIZED     "skip" (default) or "abort"
#   LOG_LEVEL               Logging level name (default INFO)
# =============================================================================

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

from core.models import OptionalFieldPolicy, OversizedSchemaPolicy

SERVER_URL_ENV = "MCP_SERVER_URL"
SERVER_COMMAND_ENV = "MCP_SERVER_COMMAND"
SESSION_ID_ENV = "MCP_SESSION_ID"
MODEL_ENV = "AGENT_MODEL"
OPTIONAL_FIELDS_ENV = "BRIDGE_OPTIONAL_FIELDS"
ON_OVERSIZED_ENV = "BRIDGE_ON_OVERSIZED"
LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


class ConfigError(RuntimeError):
    """A required setting is missing or has an unusable value."""


def require_env(var_name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return the value of an environment variable or raise ConfigError."""
    environ = os.environ if environ is None else environ
    value = environ.get(var_name)
    if value is None:
        raise ConfigError(f"Required environment variable '{var_name}' is not set.")
    if not value.strip():
        raise ConfigError(f"Environment variable '{var_name}' is empty.")
    return value


@dataclass(frozen=True)
class BridgeSettings:
    server_url: str | None = None
    server_command: tuple[str, ...] = ()
    session_id: str | None = None
    model: str = DEFAULT_MODEL
    optional_fields: OptionalFieldPolicy = OptionalFieldPolicy.NULLABLE
    on_oversized: OversizedSchemaPolicy = OversizedSchemaPolicy.SKIP
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BridgeSettings":
        """Build settings from the environment.

        Loads ``.env`` first when reading the real process environment.

        Raises:
            ConfigError: if neither a server URL nor a server command is set,
                a server URL is set without a session id, or a policy variable
                has an unknown value.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        server_url = (environ.get(SERVER_URL_ENV) or "").strip() or None
        server_command = tuple(shlex.split(environ.get(SERVER_COMMAND_ENV) or ""))
        if server_url is None and not server_command:
            raise ConfigError(
                f"Set {SERVER_URL_ENV} or {SERVER_COMMAND_ENV} to reach a tool server."
            )

        # The HTTP server only answers within an established session.
        session_id = (environ.get(SESSION_ID_ENV) or "").strip() or None
        if server_url is not None:
            session_id = require_env(SESSION_ID_ENV, environ).strip()

        return cls(
            server_url=server_url,
            server_command=server_command,
            session_id=session_id,
            model=(environ.get(MODEL_ENV) or "").strip() or DEFAULT_MODEL,
            optional_fields=_parse_choice(
                environ, OPTIONAL_FIELDS_ENV, OptionalFieldPolicy, OptionalFieldPolicy.NULLABLE
            ),
            on_oversized=_parse_choice(
                environ, ON_OVERSIZED_ENV, OversizedSchemaPolicy, OversizedSchemaPolicy.SKIP
            ),
            log_level=(environ.get(LOG_LEVEL_ENV) or "INFO").strip().upper(),
        )


def _parse_choice(environ, var_name, enum_cls, default):
    raw = (environ.get(var_name) or "").strip().lower()
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"{var_name} must be one of: {choices} (got '{raw}').") from None
