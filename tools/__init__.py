# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the protocol edge.  mcp_server.py:
#     1. Declares each tool's parameter schema in its function signature
#     2. Builds a core/ request record from the validated arguments
#     3. Runs the matching core/ translator
#     4. Returns the text, or raises ToolError so FastMCP flags isError
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build HTTP requests (that's core/content_fetch.py,
#     core/search.py and core/flight_search.py)
#   - They do NOT catch upstream or network failures (the translator
#     already turned those into error envelopes)
# =============================================================================
