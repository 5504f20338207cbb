import json
import logging

import httpx
import pytest

from conftest import (
    ASSET_URN,
    ASSETS_URL,
    POST_URN,
    UGC_POSTS_URL,
    UPLOAD_URL,
    USERINFO,
    USERINFO_URL,
    respond,
)
from core.errors import PermissionRequiredError, UpstreamError
from core.linkedin_api import build_post_payload
from core.models import MediaKind, PostRequest, Visibility


def _json_body(request: httpx.Request) -> dict:
    return json.loads(request.content)


# --- profile ----------------------------------------------------------------

def test_get_profile_maps_userinfo_and_sends_versioned_headers(api, userinfo_ok):
    profile = api.get_profile()

    assert profile.sub == "782bbtaQ"
    assert profile.name == "Ada Lovelace"
    assert profile.given_name == "Ada"
    assert profile.family_name == "Lovelace"
    assert profile.email == "ada@example.com"
    assert profile.email_verified is True
    assert profile.person_urn == "urn:li:person:782bbtaQ"

    (request,) = userinfo_ok.requests
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["LinkedIn-Version"] == "202404"
    assert request.headers["X-Restli-Protocol-Version"] == "2.0.0"


def test_profile_dict_leaves_out_missing_optional_fields(api, router):
    router.add("GET", USERINFO_URL, respond(200, {"sub": "abc", "name": "Bo"}))

    assert api.get_profile().to_dict() == {
        "sub": "abc",
        "name": "Bo",
        "given_name": "",
        "family_name": "",
    }


def test_get_profile_uses_linkedin_error_message(api, router):
    router.add(
        "GET",
        USERINFO_URL,
        respond(401, {"serviceErrorCode": 65600, "message": "Invalid access token", "status": 401}),
    )

    with pytest.raises(UpstreamError) as excinfo:
        api.get_profile()

    assert str(excinfo.value) == "Failed to get profile: Invalid access token"
    assert excinfo.value.status_code == 401
    assert excinfo.value.details["serviceErrorCode"] == 65600


def test_get_profile_without_error_body_reports_status(api, router):
    router.add("GET", USERINFO_URL, respond(503))

    with pytest.raises(UpstreamError, match="Request failed with status code 503"):
        api.get_profile()


def test_get_profile_network_failure_is_upstream_error(api, router):
    router.add("GET", USERINFO_URL, httpx.ConnectError("connection refused"))

    with pytest.raises(UpstreamError) as excinfo:
        api.get_profile()

    assert "connection refused" in str(excinfo.value)
    assert excinfo.value.status_code is None


# --- probes never raise -----------------------------------------------------

def test_test_connection_success_payload(api, userinfo_ok):
    result = api.test_connection()

    assert result["success"] is True
    assert result["api_version"] == "202404"
    assert result["user"] == {"sub": "782bbtaQ", "name": "Ada Lovelace", "email": "ada@example.com"}
    assert result["available_scopes"] == ["openid", "profile", "email"]
    assert result["rate_limits"]["daily_limit"] == "Varies by endpoint"


def test_test_connection_without_email(api, router):
    router.add("GET", USERINFO_URL, respond(200, {"sub": "x", "given_name": "X"}))

    result = api.test_connection()

    assert result["user"]["email"] == "Not provided"
    assert result["available_scopes"] == ["openid", "profile"]


@pytest.mark.parametrize(
    "failure",
    [
        respond(401, {"message": "Expired token", "status": 401}),
        httpx.ConnectError("name resolution failed"),
        httpx.ReadTimeout("timed out"),
        respond(200, ["not", "an", "object"]),
    ],
    ids=["401", "network", "timeout", "non-object-body"],
)
def test_probes_never_raise(api, router, failure):
    router.add("GET", USERINFO_URL, failure)

    status = api.test_connection()
    assert status["success"] is False
    assert status["message"].startswith("Connection failed ❌: ")
    assert status["troubleshooting"]["common_issues"]
    assert status["troubleshooting"]["solutions"]

    info = api.get_token_info()
    assert info["valid"] is False
    assert info["error"]
    assert "status_code" in info

    assert api.validate_token() is False


def test_token_info_failure_carries_status(api, router):
    router.add("GET", USERINFO_URL, respond(401, {"message": "Expired token"}))

    assert api.get_token_info() == {"valid": False, "error": "Expired token", "status_code": 401}


def test_token_info_success(api, userinfo_ok):
    info = api.get_token_info()

    assert info["valid"] is True
    assert info["user_id"] == "782bbtaQ"
    assert info["scopes_detected"] == ["openid", "profile", "email"]
    assert info["last_verified"].endswith("Z")


def test_validate_token_success(api, userinfo_ok):
    assert api.validate_token() is True


# --- posting ----------------------------------------------------------------

def test_create_text_post_payload_and_post_id(api, posting_ok):
    result = api.create_post(PostRequest(text="Hello LinkedIn", visibility=Visibility.CONNECTIONS))

    assert result == {"success": True, "postId": POST_URN, "data": {"id": POST_URN}}

    (request,) = posting_ok.sent("POST", UGC_POSTS_URL)
    assert _json_body(request) == {
        "author": "urn:li:person:782bbtaQ",
        "lifecycleState": "PUBLISHED",
        "specificContent": {
            "com.linkedin.ugc.ShareContent": {
                "shareCommentary": {"text": "Hello LinkedIn"},
                "shareMediaCategory": "NONE",
            }
        },
        "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "CONNECTIONS"},
    }


def test_create_post_accepts_bare_text(api, posting_ok):
    api.create_post("just text")

    body = _json_body(posting_ok.sent("POST", UGC_POSTS_URL)[0])
    content = body["specificContent"]["com.linkedin.ugc.ShareContent"]
    assert content["shareCommentary"] == {"text": "just text"}
    assert content["shareMediaCategory"] == "NONE"
    assert "media" not in content
    assert body["visibility"]["com.linkedin.ugc.MemberNetworkVisibility"] == "PUBLIC"


def test_create_article_post_embeds_article_media(api, posting_ok):
    api.create_post(
        PostRequest(
            text="Worth a read",
            media_kind=MediaKind.ARTICLE,
            media_url="https://example.com/post",
            media_title="A post",
        )
    )

    body = _json_body(posting_ok.sent("POST", UGC_POSTS_URL)[0])
    content = body["specificContent"]["com.linkedin.ugc.ShareContent"]
    assert content["shareMediaCategory"] == "ARTICLE"
    assert content["media"] == [
        {"status": "READY", "originalUrl": "https://example.com/post", "title": {"text": "A post"}}
    ]


def test_video_post_has_category_but_no_media():
    payload = build_post_payload(
        "urn:li:person:1", PostRequest(text="clip", media_kind=MediaKind.VIDEO, media_file="/tmp/clip.mp4")
    )
    content = payload["specificContent"]["com.linkedin.ugc.ShareContent"]

    assert content["shareMediaCategory"] == "VIDEO"
    assert "media" not in content


def test_create_post_profile_failure_keeps_step_context(api, router):
    router.add("GET", USERINFO_URL, respond(401, {"message": "Invalid access token"}))

    with pytest.raises(UpstreamError) as excinfo:
        api.create_post("hello")

    assert str(excinfo.value) == "Failed to create post: Failed to get profile: Invalid access token"
    assert excinfo.value.status_code == 401
    assert not router.sent("POST", UGC_POSTS_URL)


def test_create_post_rejected_by_linkedin(api, userinfo_ok):
    userinfo_ok.add("POST", UGC_POSTS_URL, respond(403, {"message": "Not enough permissions to access: ugcPosts"}))

    with pytest.raises(UpstreamError, match="Failed to create post: Not enough permissions"):
        api.create_post("hello")


# --- image upload -----------------------------------------------------------

def test_upload_image_two_step_returns_registered_asset(api, posting_ok, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNG fake image bytes")
    posting_ok.add("PUT", UPLOAD_URL, respond(201, {"asset": "urn:li:digitalmediaAsset:SOMETHING_ELSE"}))

    asset = api.upload_image(str(image))

    assert asset == ASSET_URN

    (register,) = posting_ok.sent("POST", ASSETS_URL)
    assert register.url.params["action"] == "registerUpload"
    assert _json_body(register) == {
        "registerUploadRequest": {
            "recipes": ["urn:li:digitalmediaRecipe:feedshare-image"],
            "owner": "urn:li:person:782bbtaQ",
            "serviceRelationships": [
                {"relationshipType": "OWNER", "identifier": "urn:li:userGeneratedContent"}
            ],
        }
    }

    (upload,) = posting_ok.sent("PUT", UPLOAD_URL)
    assert upload.content == b"\x89PNG fake image bytes"
    assert upload.headers["Content-Type"] == "application/octet-stream"
    assert upload.headers["Authorization"] == "Bearer test-token"
    assert "LinkedIn-Version" not in upload.headers


def test_image_post_references_uploaded_asset(api, posting_ok, tmp_path):
    image = tmp_path / "photo.jpg"
    image.write_bytes(b"jpeg")

    api.create_post(
        PostRequest(
            text="Look",
            media_kind=MediaKind.IMAGE,
            media_file=str(image),
            media_description="A photo",
        )
    )

    body = _json_body(posting_ok.sent("POST", UGC_POSTS_URL)[0])
    content = body["specificContent"]["com.linkedin.ugc.ShareContent"]
    assert content["shareMediaCategory"] == "IMAGE"
    assert content["media"] == [
        {"status": "READY", "media": ASSET_URN, "description": {"text": "A photo"}}
    ]
    # the author profile is looked up once and reused as the asset owner
    assert len(posting_ok.sent("GET", USERINFO_URL)) == 1


def test_failed_binary_upload_stops_post_creation(api, posting_ok, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"png")
    posting_ok.add("PUT", UPLOAD_URL, respond(500, {"message": "Upload rejected"}))

    with pytest.raises(UpstreamError) as excinfo:
        api.create_post(PostRequest(text="Look", media_kind=MediaKind.IMAGE, media_file=str(image)))

    assert str(excinfo.value) == "Failed to create post: Failed to upload image: Upload rejected"
    assert excinfo.value.status_code == 500
    assert not posting_ok.sent("POST", UGC_POSTS_URL)


def test_missing_image_file_is_upstream_error(api, posting_ok, tmp_path):
    with pytest.raises(UpstreamError, match="Failed to upload image"):
        api.upload_image(str(tmp_path / "nope.png"))

    assert not posting_ok.sent("PUT", UPLOAD_URL)


def test_malformed_registration_is_upstream_error(api, userinfo_ok, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"png")
    userinfo_ok.add("POST", ASSETS_URL, respond(200, {"value": {}}))

    with pytest.raises(UpstreamError, match="registerUpload response is missing"):
        api.upload_image(str(image), owner_urn="urn:li:person:1")


# --- restricted capabilities ------------------------------------------------

RESTRICTED_CALLS = [
    ("get_connections", (), "Failed to get connections: Connections API"),
    ("search_people", ("engineers",), "Failed to search people: People search"),
    ("get_company_info", ("1337",), "Failed to get company info: Company API"),
    ("send_message", ("abc", "hi"), "Failed to send message: Messaging API"),
    ("like_post", ("urn:li:share:1",), "Failed to like post: Social actions API"),
    ("comment_on_post", ("urn:li:share:1", "nice"), "Failed to comment on post: Comments API"),
    ("get_profile_views", (), "Failed to get profile views: Analytics API"),
]


@pytest.mark.parametrize("method,args,prefix", RESTRICTED_CALLS, ids=[c[0] for c in RESTRICTED_CALLS])
def test_restricted_capabilities_always_fail_offline(api, router, caplog, method, args, prefix):
    with caplog.at_level(logging.WARNING, logger="tests.linkedin_mcp"):
        with pytest.raises(PermissionRequiredError) as excinfo:
            getattr(api, method)(*args)

    message = str(excinfo.value)
    assert message.startswith(prefix)
    assert "requires elevated LinkedIn API permissions" in message
    assert router.requests == []
    assert any(record.levelno == logging.WARNING and "❌" in record.getMessage() for record in caplog.records)
