# =============================================================================
# tools/mcp_server.py  —  FastMCP Server (LinkedIn tools & resources)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Publishes the catalogue from core/catalog.py over MCP.  Each tool is a
#   CatalogueTool: it forwards its arguments to ToolDispatcher and
#   returns the rendered text.  All behavior lives in core/.
#
# HOW IT WORKS (the flow):
#   1. The host (an agent) calls a tool by name, e.g. "create_text_post"
#   2. FastMCP routes the call to the CatalogueTool of that name
#   3. The tool hands the raw arguments to ToolDispatcher.call_tool
#   4. The dispatcher calls LinkedInAPI and renders the outcome as text
#   5. The host receives one text content entry
#
# FAULTS vs ANSWERS:
#   Bad arguments and unknown names are raised as ToolError, so the call
#   fails outright.  LinkedIn refusing an operation is NOT a fault: the
#   host gets ordinary text starting with "❌".
#
# RUNNING THIS SERVER:
#     a) python main.py
#     b) python -m tools.mcp_server
#     c) linkedin-easy-mcp-server   (console script)
#   LINKEDIN_ACCESS_TOKEN must be set (environment or .env file).
# =============================================================================

import logging
import sys
from typing import Any, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult

from core import SERVER_NAME, __version__
from core.catalog import RESOURCES, TOOLS
from core.config import Settings, load_settings
from core.dispatcher import ToolDispatcher
from core.errors import ConfigurationError, InvalidArgumentError, UnknownToolError
from core.linkedin_api import LinkedInAPI
from core.models import ResourceDescriptor, ToolDescriptor

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP JSON-RPC stream, so every log line goes to STDERR.
# =============================================================================
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger("linkedin_mcp")

mcp = FastMCP(SERVER_NAME)

# The dispatcher is built on first use (or installed by main / tests), so
# importing this module does not require an access token.
_dispatcher: Optional[ToolDispatcher] = None


def build_dispatcher(settings: Settings) -> ToolDispatcher:
    api = LinkedInAPI(settings.access_token, logger=logger.getChild("api"))
    return ToolDispatcher(api, logger=logger.getChild("dispatcher"))


def install_dispatcher(dispatcher: Optional[ToolDispatcher]) -> None:
    global _dispatcher
    _dispatcher = dispatcher


def get_dispatcher() -> ToolDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher(load_settings())
    return _dispatcher


def _call(name: str, arguments: Optional[dict[str, Any]]) -> str:
    try:
        return get_dispatcher().call_tool(name, arguments).text
    except (InvalidArgumentError, UnknownToolError) as exc:
        raise ToolError(f"Tool execution failed: {exc}") from exc


# =============================================================================
# Tools
# =============================================================================
# Registered straight from the catalogue. The schema a host sees is
# ToolDescriptor.input_schema; raw arguments reach the dispatcher unchanged
# and it alone checks them and fills defaults.
#
#   ✅ test_connection, get_profile, validate_token, get_token_info
#   ⚠️ create_text_post, create_article_post, create_image_post, create_post
#   ❌ get_connections, search_people, get_company_info, send_message,
#      like_post, comment_on_post, get_profile_views
# =============================================================================
class CatalogueTool(Tool):
    """A FastMCP tool backed by one ToolDescriptor."""

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult(content=_call(self.name, arguments))


def _register_tool(tool: ToolDescriptor) -> None:
    mcp.add_tool(
        CatalogueTool(
            name=tool.name,
            description=tool.description,
            parameters=tool.input_schema,
        )
    )


for _tool in TOOLS:
    _register_tool(_tool)


# =============================================================================
# Resources
# =============================================================================
# Registered straight from the catalogue; each read returns JSON inline.
# =============================================================================
def _register_resource(resource: ResourceDescriptor) -> None:
    def read() -> str:
        return get_dispatcher().read_resource(resource.uri).text

    mcp.resource(
        resource.uri,
        name=resource.name,
        description=resource.description,
        mime_type=resource.mime_type,
    )(read)


for _resource in RESOURCES:
    _register_resource(_resource)


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    load_dotenv()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("❌ %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    install_dispatcher(build_dispatcher(settings))

    logger.info("🚀 LinkedIn Easy MCP Server v%s running on stdio", __version__)
    logger.info("ℹ️  Use test_connection to verify your setup")
    mcp.run()


if __name__ == "__main__":
    main()
