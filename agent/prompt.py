# =============================================================================
# agent/prompt.py  —  The Agent's System Prompt
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds the instructions given to the LLM.  The bridged tools bring their
#   own names, descriptions and input schemas; the prompt only has to tell
#   the model what kind of assistant it is and which tools to reach for.
#
#   The GitHub tools exposed by the server are all prefixed "gh-", so the
#   prompt names that prefix instead of listing each tool.
# =============================================================================

GITHUB_AGENT_PROMPT = """
You are a helpful github assistant that provides accurate github information.

Use all of the gh-* tools to help users with their github needs.

When a tool call fails, say so plainly and explain what you tried.  Do not
invent repository data that no tool returned.
""".strip()
