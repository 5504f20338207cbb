# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP and core/.  mcp_server.py
#   declares one FastMCP tool per catalogue entry, registers the
#   resources, and forwards every call to core.dispatcher.ToolDispatcher.
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate arguments beyond their type annotations
#   - They do NOT talk to LinkedIn (that's core/linkedin_api.py)
#   - They do NOT format results (that's core/dispatcher.py)
# =============================================================================
