# =============================================================================
# core/catalog.py  —  The Tool & Resource Catalogue
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares every tool and resource the server offers, in the order they
#   are listed.  This table answers "list" requests AND drives "call"
#   dispatch; there is no second copy anywhere.
#
# DESCRIPTION MARKERS (read by the agent when choosing a tool):
#   ✅  always available with a basic member token
#   ⚠️  needs the w_member_social scope
#   ❌  restricted by LinkedIn; listed so the surface is discoverable,
#       but every call comes back with a permission-required answer
#
# HANDLERS:
#   Each handler takes (api, args) where `args` has already been checked
#   and defaulted by the dispatcher, and returns plain JSON-able data.
# =============================================================================

from core.linkedin_api import utc_timestamp
from core.models import (
    FieldSpec,
    MediaKind,
    PostRequest,
    ResourceDescriptor,
    ToolDescriptor,
    Visibility,
)

PARTNERSHIP_NOTE = (
    "This feature requires special LinkedIn partnership approval "
    "and is not available for standard applications."
)
LIMITED_ACCESS_NOTE = "This feature has limited access for standard applications."


# =============================================================================
# Shared argument fields
# =============================================================================
POST_TEXT = FieldSpec("text", "string", "The text content of the post", required=True)
VISIBILITY = FieldSpec(
    "visibility",
    "string",
    "Post visibility: PUBLIC or CONNECTIONS",
    default=Visibility.PUBLIC.value,
    enum=tuple(v.value for v in Visibility),
)
START = FieldSpec("start", "number", "Starting index for pagination (default: 0)", default=0)
POST_ID = FieldSpec("postId", "string", "The LinkedIn post ID", required=True)


# =============================================================================
# Handlers
# =============================================================================
def _test_connection(api, args):
    return api.test_connection()


def _get_profile(api, args):
    return api.get_profile().to_dict()


def _validate_token(api, args):
    valid = api.validate_token()
    return {
        "valid": valid,
        "message": "Token is valid ✅" if valid else "Token is invalid or expired ❌",
        "timestamp": utc_timestamp(),
    }


def _get_token_info(api, args):
    return api.get_token_info()


def _create_text_post(api, args):
    return api.create_post(
        PostRequest(
            text=args["text"],
            media_kind=MediaKind.NONE,
            visibility=Visibility(args["visibility"]),
        )
    )


def _create_article_post(api, args):
    return api.create_post(
        PostRequest(
            text=args["text"],
            media_kind=MediaKind.ARTICLE,
            media_url=args["articleUrl"],
            media_title=args["articleTitle"],
            media_description=args["articleDescription"],
            visibility=Visibility(args["visibility"]),
        )
    )


def _create_image_post(api, args):
    return api.create_post(
        PostRequest(
            text=args["text"],
            media_kind=MediaKind.IMAGE,
            media_file=args["imagePath"],
            media_title=args["imageTitle"],
            media_description=args["imageDescription"],
            visibility=Visibility(args["visibility"]),
        )
    )


def _create_post(api, args):
    # legacy entry point: bare text, public, no media
    return api.create_post(args["text"])


def _get_connections(api, args):
    return api.get_connections(args["start"], args["count"])


def _search_people(api, args):
    return api.search_people(args["keywords"], args["start"], args["count"])


def _get_company_info(api, args):
    return api.get_company_info(args["companyId"])


def _send_message(api, args):
    return api.send_message(args["recipientId"], args["message"])


def _like_post(api, args):
    return api.like_post(args["postId"])


def _comment_on_post(api, args):
    return api.comment_on_post(args["postId"], args["comment"])


def _get_profile_views(api, args):
    return api.get_profile_views()


# =============================================================================
# Tools
# =============================================================================
TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="test_connection",
        description="✅ Test LinkedIn API connection and token validity (Always available)",
        handler=_test_connection,
    ),
    ToolDescriptor(
        name="get_profile",
        description="✅ Get your LinkedIn profile information using OpenID Connect (Always available)",
        handler=_get_profile,
    ),
    ToolDescriptor(
        name="validate_token",
        description="✅ Validate if your access token is still valid (Always available)",
        handler=_validate_token,
    ),
    ToolDescriptor(
        name="get_token_info",
        description="✅ Get detailed information about your access token and scopes (Always available)",
        handler=_get_token_info,
    ),
    ToolDescriptor(
        name="create_text_post",
        description="⚠️ Create a simple text post on LinkedIn (Requires w_member_social scope)",
        handler=_create_text_post,
        fields=(POST_TEXT, VISIBILITY),
        success_banner="Text post created successfully ✅",
    ),
    ToolDescriptor(
        name="create_article_post",
        description="⚠️ Create a post with an article/URL on LinkedIn (Requires w_member_social scope)",
        handler=_create_article_post,
        fields=(
            POST_TEXT,
            FieldSpec("articleUrl", "string", "URL of the article to share", required=True),
            FieldSpec("articleTitle", "string", "Title for the article (optional)"),
            FieldSpec("articleDescription", "string", "Description for the article (optional)"),
            VISIBILITY,
        ),
        success_banner="Article post created successfully ✅",
    ),
    ToolDescriptor(
        name="create_image_post",
        description="⚠️ Create a post with an image on LinkedIn (Requires w_member_social scope)",
        handler=_create_image_post,
        fields=(
            POST_TEXT,
            FieldSpec("imagePath", "string", "Local file path to the image to upload", required=True),
            FieldSpec("imageTitle", "string", "Title for the image (optional)"),
            FieldSpec("imageDescription", "string", "Description for the image (optional)"),
            VISIBILITY,
        ),
        success_banner="Image post created successfully ✅",
    ),
    ToolDescriptor(
        name="create_post",
        description="⚠️ Create a text post on LinkedIn (Legacy, use create_text_post instead)",
        handler=_create_post,
        fields=(POST_TEXT,),
        success_banner="Post created successfully ✅",
    ),
    # --- restricted by LinkedIn -------------------------------------------
    ToolDescriptor(
        name="get_connections",
        description="❌ Get your LinkedIn connections (Requires special partnership approval)",
        handler=_get_connections,
        fields=(
            START,
            FieldSpec(
                "count", "number", "Number of connections to retrieve (default: 50, max: 500)", default=50
            ),
        ),
        permission_note=PARTNERSHIP_NOTE,
    ),
    ToolDescriptor(
        name="search_people",
        description="❌ Search for people on LinkedIn (Requires special partnership approval)",
        handler=_search_people,
        fields=(
            FieldSpec("keywords", "string", "Keywords to search for", required=True),
            START,
            FieldSpec("count", "number", "Number of results to retrieve (default: 10)", default=10),
        ),
        permission_note=PARTNERSHIP_NOTE,
    ),
    ToolDescriptor(
        name="get_company_info",
        description="❌ Get information about a LinkedIn company (Limited access)",
        handler=_get_company_info,
        fields=(FieldSpec("companyId", "string", "The LinkedIn company ID", required=True),),
        permission_note=LIMITED_ACCESS_NOTE,
    ),
    ToolDescriptor(
        name="send_message",
        description="❌ Send a message to a LinkedIn connection (Requires special partnership approval)",
        handler=_send_message,
        fields=(
            FieldSpec("recipientId", "string", "The LinkedIn ID of the recipient", required=True),
            FieldSpec("message", "string", "The message to send", required=True),
        ),
        permission_note=PARTNERSHIP_NOTE,
    ),
    ToolDescriptor(
        name="like_post",
        description="❌ Like a LinkedIn post (Requires special partnership approval)",
        handler=_like_post,
        fields=(POST_ID,),
        permission_note=PARTNERSHIP_NOTE,
    ),
    ToolDescriptor(
        name="comment_on_post",
        description="❌ Comment on a LinkedIn post (Requires special partnership approval)",
        handler=_comment_on_post,
        fields=(POST_ID, FieldSpec("comment", "string", "The comment text", required=True)),
        permission_note=PARTNERSHIP_NOTE,
    ),
    ToolDescriptor(
        name="get_profile_views",
        description="❌ Get analytics about your profile views (Requires special partnership approval)",
        handler=_get_profile_views,
        permission_note=PARTNERSHIP_NOTE,
    ),
)

TOOLS_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOLS}


# =============================================================================
# Resources
# =============================================================================
RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        uri="linkedin://profile",
        name="Current LinkedIn Profile",
        description="Your current LinkedIn profile information using OpenID Connect",
        handler=lambda api: api.get_profile().to_dict(),
    ),
    ResourceDescriptor(
        uri="linkedin://token-info",
        name="Access Token Information",
        description="Information about your LinkedIn access token and scopes",
        handler=lambda api: api.get_token_info(),
    ),
    ResourceDescriptor(
        uri="linkedin://api-status",
        name="LinkedIn API Status",
        description="Current status and connection test for LinkedIn API",
        handler=lambda api: api.test_connection(),
    ),
    ResourceDescriptor(
        uri="linkedin://connections",
        name="LinkedIn Connections (Restricted)",
        description="Your LinkedIn connections list - Requires special partnership approval",
        handler=lambda api: api.get_connections(),
        permission_note=PARTNERSHIP_NOTE,
    ),
)

RESOURCES_BY_URI: dict[str, ResourceDescriptor] = {resource.uri: resource for resource in RESOURCES}
