# =============================================================================
# main.py  —  Entry Point for the LinkedIn Easy MCP Server
# =============================================================================
#
# HOW TO RUN:
#   LINKEDIN_ACCESS_TOKEN=... python main.py
#
# WHAT HAPPENS:
#   1. .env is loaded (python-dotenv), then LINKEDIN_ACCESS_TOKEN is read
#   2. A LinkedInAPI adapter and a ToolDispatcher are built
#   3. The FastMCP server starts on stdio and waits for a host to connect
#
#   A missing token is fatal: the error goes to stderr and the process
#   exits with status 1.
#
# Hosts usually launch this as a subprocess, e.g. in an MCP client config:
#   {"command": "python", "args": ["/path/to/main.py"],
#    "env": {"LINKEDIN_ACCESS_TOKEN": "..."}}
# =============================================================================

from tools.mcp_server import main

if __name__ == "__main__":
    main()
