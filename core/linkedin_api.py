# =============================================================================
# core/linkedin_api.py  —  LinkedIn REST Adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps https://api.linkedin.com/v2 behind one method per capability.
#   Every method either returns plain data or raises a core.errors type;
#   httpx exceptions never leak past this module.
#
# THE THREE KINDS OF OPERATION:
#   1. Probes (test_connection, validate_token, get_token_info) hit
#      GET /userinfo and NEVER raise.  Failure is part of their answer.
#   2. Real calls (get_profile, create_post, upload_image) raise
#      UpstreamError with a "Failed to <step>: <detail>" message.
#   3. Restricted capabilities (connections, search, company, messaging,
#      likes, comments, analytics) are closed to standard LinkedIn apps.
#      They make no request at all and always raise PermissionRequiredError.
#
# NO TIMEOUT, NO RETRY:
#   The default client is built with timeout=None.  A hung LinkedIn call
#   blocks that one tool call; there is nothing to retry against.
# =============================================================================

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, NoReturn, Optional, Union

import httpx

from core.errors import PermissionRequiredError, UpstreamError
from core.models import MediaKind, PostRequest, ProfileInfo, Visibility

BASE_URL = "https://api.linkedin.com/v2"
API_VERSION = "202404"
RESTLI_PROTOCOL_VERSION = "2.0.0"

SHARE_CONTENT_TYPE = "com.linkedin.ugc.ShareContent"
MEMBER_VISIBILITY_TYPE = "com.linkedin.ugc.MemberNetworkVisibility"
FEEDSHARE_IMAGE_RECIPE = "urn:li:digitalmediaRecipe:feedshare-image"
UPLOAD_MECHANISM_TYPE = "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest"
POST_ID_HEADER = "x-restli-id"

_NOT_FOR_STANDARD_APPS = "This feature is not available for standard applications."

TROUBLESHOOTING = {
    "common_issues": [
        "Token expired (LinkedIn tokens expire in 60 days)",
        "Invalid or revoked access token",
        "Missing required scopes (openid, profile, email)",
        "Application not approved for requested permissions",
    ],
    "solutions": [
        "Generate a new access token",
        "Verify scopes in LinkedIn Developer Portal",
        "Check if application has required permissions",
        "Review LinkedIn API Terms of Use compliance",
    ],
}

RATE_LIMITS = {
    "daily_limit": "Varies by endpoint",
    "note": "Rate limits are enforced per member and per application",
}


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def detect_scopes(userinfo: dict) -> list[str]:
    """Infer granted OAuth scopes from which userinfo fields came back."""
    scopes = ["openid"]
    if userinfo.get("name") or userinfo.get("given_name"):
        scopes.append("profile")
    if userinfo.get("email"):
        scopes.append("email")
    return scopes


def describe_failure(exc: Exception) -> tuple[str, Optional[int], Any]:
    """Reduce a failed call to (message, status_code, decoded_body).

    For HTTP errors the message is LinkedIn's own `message` field when the
    body carries one.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            body = response.json()
        except ValueError:
            body = response.text or None
        message = body.get("message") if isinstance(body, dict) else None
        if not message:
            message = f"Request failed with status code {response.status_code}"
        return str(message), response.status_code, body
    return str(exc) or exc.__class__.__name__, None, None


def build_register_upload_request(owner_urn: str) -> dict:
    return {
        "registerUploadRequest": {
            "recipes": [FEEDSHARE_IMAGE_RECIPE],
            "owner": owner_urn,
            "serviceRelationships": [
                {
                    "relationshipType": "OWNER",
                    "identifier": "urn:li:userGeneratedContent",
                }
            ],
        }
    }


def parse_register_upload_response(body: Any) -> tuple[str, str]:
    """Pull (upload_url, asset) out of a registerUpload response."""
    try:
        value = body["value"]
        upload_url = value["uploadMechanism"][UPLOAD_MECHANISM_TYPE]["uploadUrl"]
        asset = value["asset"]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"registerUpload response is missing {exc}") from exc
    return upload_url, asset


def build_post_payload(author_urn: str, request: PostRequest, media: Optional[list] = None) -> dict:
    """Build the /ugcPosts body for one post.

    `media` is only included when it is non-empty.
    """
    share_content: dict[str, Any] = {
        "shareCommentary": {"text": request.text},
        "shareMediaCategory": MediaKind(request.media_kind or MediaKind.NONE).value,
    }
    if media:
        share_content["media"] = media

    return {
        "author": author_urn,
        "lifecycleState": "PUBLISHED",
        "specificContent": {SHARE_CONTENT_TYPE: share_content},
        "visibility": {
            MEMBER_VISIBILITY_TYPE: Visibility(request.visibility or Visibility.PUBLIC).value,
        },
    }


def _response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class LinkedInAPI:
    """Client for the subset of the LinkedIn v2 API a member token can use."""

    def __init__(
        self,
        access_token: str,
        client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
        base_url: str = BASE_URL,
    ):
        self._access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.api_version = API_VERSION
        self._client = client or httpx.Client(timeout=None)
        self._owns_client = client is None
        self._logger = logger or logging.getLogger(__name__)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "LinkedInAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- plumbing ---------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
            "LinkedIn-Version": self.api_version,
            "X-Restli-Protocol-Version": RESTLI_PROTOCOL_VERSION,
        }

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self._client.request(method, f"{self.base_url}{path}", headers=self._headers(), **kwargs)
        response.raise_for_status()
        return response

    def _upstream_error(self, context: str, exc: Exception) -> UpstreamError:
        message, status_code, body = describe_failure(exc)
        self._logger.error("LinkedIn API error (%s): %s", context, body if body is not None else message)
        return UpstreamError(f"{context}: {message}", status_code=status_code, details=body)

    def _userinfo(self) -> dict:
        """GET /userinfo.  Raises httpx.HTTPError or ValueError."""
        data = self._send("GET", "/userinfo").json()
        if not isinstance(data, dict):
            raise ValueError("userinfo response is not a JSON object")
        return data

    # --- identity ---------------------------------------------------------
    def get_profile(self) -> ProfileInfo:
        """Fetch the signed-in member via the OpenID Connect userinfo endpoint."""
        try:
            data = self._userinfo()
        except (httpx.HTTPError, ValueError) as exc:
            raise self._upstream_error("Failed to get profile", exc) from exc
        return ProfileInfo.from_userinfo(data)

    def test_connection(self) -> dict:
        """Probe the API and report on it.  Never raises.

        Returns a dict with `success` True plus user and scope details, or
        `success` False plus the status and troubleshooting hints.
        """
        try:
            data = self._userinfo()
        except (httpx.HTTPError, ValueError) as exc:
            message, status_code, body = describe_failure(exc)
            self._logger.error("LinkedIn API connection test failed: %s", body if body is not None else message)
            return {
                "success": False,
                "message": f"Connection failed ❌: {message}",
                "timestamp": utc_timestamp(),
                "status": status_code,
                "error_details": body,
                "troubleshooting": TROUBLESHOOTING,
            }

        return {
            "success": True,
            "message": "LinkedIn API connection successful ✅",
            "timestamp": utc_timestamp(),
            "api_version": self.api_version,
            "user": {
                "sub": data.get("sub"),
                "name": data.get("name"),
                "email": data.get("email") or "Not provided",
            },
            "available_scopes": detect_scopes(data),
            "rate_limits": RATE_LIMITS,
        }

    def validate_token(self) -> bool:
        try:
            self._userinfo()
        except (httpx.HTTPError, ValueError):
            return False
        return True

    def get_token_info(self) -> dict:
        """Describe the access token.  Never raises."""
        try:
            data = self._userinfo()
        except (httpx.HTTPError, ValueError) as exc:
            message, status_code, _ = describe_failure(exc)
            return {"valid": False, "error": message, "status_code": status_code}

        return {
            "valid": True,
            "user_id": data.get("sub"),
            "scopes_detected": detect_scopes(data),
            "last_verified": utc_timestamp(),
        }

    # --- publishing -------------------------------------------------------
    def create_post(self, request: Union[PostRequest, str]) -> dict:
        """Publish a UGC post as the signed-in member.

        Args:
            request: Full post options, or a bare string for a public
                text-only post.

        Returns:
            {"success": True, "postId": <x-restli-id header>, "data": <body>}

        Raises:
            UpstreamError: if the profile lookup, the image upload or the
                post submission fails.
        """
        if isinstance(request, str):
            request = PostRequest(text=request)

        try:
            author_urn = self.get_profile().person_urn
            media = self._media_for(request, author_urn)
            response = self._send("POST", "/ugcPosts", json=build_post_payload(author_urn, request, media))
        except UpstreamError as exc:
            raise UpstreamError(
                f"Failed to create post: {exc}", status_code=exc.status_code, details=exc.details
            ) from exc
        except httpx.HTTPError as exc:
            raise self._upstream_error("Failed to create post", exc) from exc

        post_id = response.headers.get(POST_ID_HEADER)
        self._logger.info("Created post %s", post_id)
        return {"success": True, "postId": post_id, "data": _response_body(response)}

    def _media_for(self, request: PostRequest, owner_urn: str) -> list[dict]:
        if request.media_kind == MediaKind.ARTICLE and request.media_url:
            entry: dict[str, Any] = {"status": "READY", "originalUrl": request.media_url}
        elif request.media_kind == MediaKind.IMAGE and request.media_file:
            entry = {"status": "READY", "media": self.upload_image(request.media_file, owner_urn=owner_urn)}
        else:
            return []

        if request.media_title:
            entry["title"] = {"text": request.media_title}
        if request.media_description:
            entry["description"] = {"text": request.media_description}
        return [entry]

    def upload_image(self, file_path: str, owner_urn: Optional[str] = None) -> str:
        """Upload a local image and return its digital media asset URN.

        Step A registers the upload and yields an upload URL plus the asset;
        step B PUTs the raw file bytes to that URL.  The returned asset is
        always the one from step A.
        """
        try:
            if owner_urn is None:
                owner_urn = self.get_profile().person_urn

            registration = self._send(
                "POST",
                "/assets",
                params={"action": "registerUpload"},
                json=build_register_upload_request(owner_urn),
            )
            upload_url, asset = parse_register_upload_response(registration.json())

            image_bytes = Path(file_path).read_bytes()
            upload = self._client.put(
                upload_url,
                content=image_bytes,
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "Content-Type": "application/octet-stream",
                },
            )
            upload.raise_for_status()
        except UpstreamError as exc:
            raise UpstreamError(
                f"Failed to upload image: {exc}", status_code=exc.status_code, details=exc.details
            ) from exc
        except (httpx.HTTPError, ValueError, OSError) as exc:
            raise self._upstream_error("Failed to upload image", exc) from exc

        self._logger.info("Uploaded %s as %s", file_path, asset)
        return asset

    # --- restricted capabilities -----------------------------------------
    # Each of these is closed to standard LinkedIn applications.  They raise
    # unconditionally and never touch the network.
    def _restricted(self, action: str, warning: str, reason: str) -> NoReturn:
        self._logger.warning("❌ %s", warning)
        raise PermissionRequiredError(f"Failed to {action}: {reason}")

    def get_connections(self, start: int = 0, count: int = 50) -> NoReturn:
        self._restricted(
            "get connections",
            "Connections API requires special LinkedIn partnership approval",
            "Connections API requires elevated LinkedIn API permissions and special approval "
            f"from LinkedIn. {_NOT_FOR_STANDARD_APPS}",
        )

    def search_people(self, keywords: str, start: int = 0, count: int = 10) -> NoReturn:
        self._restricted(
            "search people",
            "People search API is restricted for most applications",
            "People search requires elevated LinkedIn API permissions and special approval "
            f"from LinkedIn. {_NOT_FOR_STANDARD_APPS}",
        )

    def get_company_info(self, company_id: str) -> NoReturn:
        self._restricted(
            "get company info",
            "Company API access is limited for most applications",
            "Company API requires elevated LinkedIn API permissions. "
            "This feature may not be available for standard applications.",
        )

    def send_message(self, recipient_id: str, message: str) -> NoReturn:
        self._restricted(
            "send message",
            "Messaging API requires special LinkedIn partnership approval",
            "Messaging API requires elevated LinkedIn API permissions and special approval "
            f"from LinkedIn. {_NOT_FOR_STANDARD_APPS}",
        )

    def like_post(self, post_id: str) -> NoReturn:
        self._restricted(
            "like post",
            "Social actions (likes) API requires special LinkedIn permissions",
            "Social actions API requires elevated LinkedIn API permissions and special approval "
            f"from LinkedIn. {_NOT_FOR_STANDARD_APPS}",
        )

    def comment_on_post(self, post_id: str, comment: str) -> NoReturn:
        self._restricted(
            "comment on post",
            "Comments API requires special LinkedIn permissions",
            "Comments API requires elevated LinkedIn API permissions and special approval "
            f"from LinkedIn. {_NOT_FOR_STANDARD_APPS}",
        )

    def get_profile_views(self) -> NoReturn:
        self._restricted(
            "get profile views",
            "Analytics API requires special LinkedIn partnership approval",
            "Analytics API requires elevated LinkedIn API permissions and special approval "
            f"from LinkedIn. {_NOT_FOR_STANDARD_APPS}",
        )
