# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the translation layer: request records, cross-field
# rules, request builders and the generic Translator.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The core speaks httpx on one
#   side and returns plain ToolEnvelope values on the other, so every rule
#   and every request it builds can be tested without an MCP session.
# =============================================================================
