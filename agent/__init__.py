# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer consumes the bridged tool registry.  It:
#     1. Declares each bridged tool to the LLM (name, description, schema)
#     2. Validates the LLM's arguments before a tool is executed
#     3. Hands the normalized tool results back to the LLM
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the schema translation (that's in core/)
#   - It is NOT the remote call plumbing (that's in tools/)
# =============================================================================
