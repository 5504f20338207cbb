# =============================================================================
# core/__init__.py
# =============================================================================
# This package holds everything the LinkedIn MCP server actually does:
#
#   models.py       data records (ProfileInfo, PostRequest, descriptors, ...)
#   errors.py       error taxonomy
#   config.py       environment configuration
#   linkedin_api.py REST adapter for api.linkedin.com
#   catalog.py      the tool/resource table
#   dispatcher.py   argument checks, routing, response rendering
#
# Nothing here imports FastMCP.  The tools/ package is the only place that
# knows about the protocol framework.
# =============================================================================

SERVER_NAME = "linkedin-easy-mcp-server"
__version__ = "2.0.0"
