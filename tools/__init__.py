# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the bridge between a remote MCP tool server and the agent.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between the tool server and the agent
#   framework:
#     - mcp_session.py talks to the server through a FastMCP client
#     - bridge.py turns each advertised tool into a typed, callable entry
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT contain schema or response logic (that's in core/)
#   - They do NOT know about Google ADK (that's in agent/)
# =============================================================================
