# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the pure logic of the tool bridge.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK or FastMCP.  The schema
#   translator and the response fold only need pydantic, so they can be
#   tested without a tool server or an LLM.
#
#   models.py             data model (descriptors, stats, envelopes)
#   schema_translator.py  JSON Schema → pydantic types
#   responses.py          multi-part tool response → one dict
#   config.py             settings read from the environment
# =============================================================================
