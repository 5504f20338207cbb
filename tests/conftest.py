"""
Shared fixtures: a fake LinkedIn API served through httpx.MockTransport.

`router` records every outbound request, so tests can assert both on what
was sent and on the fact that nothing was sent at all.
"""
import logging
from typing import Any, Callable, Union

import httpx
import pytest

from core.dispatcher import ToolDispatcher
from core.linkedin_api import BASE_URL, LinkedInAPI

USERINFO_URL = f"{BASE_URL}/userinfo"
UGC_POSTS_URL = f"{BASE_URL}/ugcPosts"
ASSETS_URL = f"{BASE_URL}/assets"
UPLOAD_URL = "https://api.linkedin.com/mediaUpload/C5522AQ/feedshare-uploadedImage/0"
ASSET_URN = "urn:li:digitalmediaAsset:C5522AQHn46pwH96hxQ"
POST_URN = "urn:li:share:7100000000000000000"

USERINFO = {
    "sub": "782bbtaQ",
    "name": "Ada Lovelace",
    "given_name": "Ada",
    "family_name": "Lovelace",
    "picture": "https://media.licdn.com/dms/image/ada.jpg",
    "locale": "en_GB",
    "email": "ada@example.com",
    "email_verified": True,
}

Handler = Union[Exception, Callable[[httpx.Request], httpx.Response]]


class RecordingRouter:
    """MockTransport handler keyed by (method, url without query)."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method, url)] = handler

    def sent(self, method: str, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and _route_key(r)[1] == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(_route_key(request))
        if handler is None:
            return httpx.Response(404, json={"message": "No route", "status": 404})
        if isinstance(handler, Exception):
            raise handler
        return handler(request)


def _route_key(request: httpx.Request) -> tuple[str, str]:
    url = request.url
    return request.method, f"{url.scheme}://{url.host}{url.path}"


def respond(status: int, body: Any = None, headers: dict | None = None) -> Callable[[httpx.Request], httpx.Response]:
    """A route handler that answers with a fresh response every time."""
    if body is None:
        return lambda request: httpx.Response(status, headers=headers)
    return lambda request: httpx.Response(status, json=body, headers=headers)


@pytest.fixture
def router() -> RecordingRouter:
    return RecordingRouter()


@pytest.fixture
def http_client(router):
    client = httpx.Client(transport=httpx.MockTransport(router))
    yield client
    client.close()


@pytest.fixture
def mcp_logger() -> logging.Logger:
    return logging.getLogger("tests.linkedin_mcp")


@pytest.fixture
def api(http_client, mcp_logger) -> LinkedInAPI:
    return LinkedInAPI("test-token", client=http_client, logger=mcp_logger.getChild("api"))


@pytest.fixture
def dispatcher(api, mcp_logger) -> ToolDispatcher:
    return ToolDispatcher(api, logger=mcp_logger.getChild("dispatcher"))


@pytest.fixture
def userinfo_ok(router):
    router.add("GET", USERINFO_URL, respond(200, USERINFO))
    return router


@pytest.fixture
def posting_ok(userinfo_ok):
    """userinfo + ugcPosts + the two-step image upload all succeed."""
    router = userinfo_ok
    router.add(
        "POST",
        UGC_POSTS_URL,
        respond(201, {"id": POST_URN}, headers={"x-restli-id": POST_URN}),
    )
    router.add(
        "POST",
        ASSETS_URL,
        respond(
            200,
            {
                "value": {
                    "uploadMechanism": {
                        "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest": {
                            "headers": {},
                            "uploadUrl": UPLOAD_URL,
                        }
                    },
                    "mediaArtifact": "urn:li:digitalmediaMediaArtifact:(x)",
                    "asset": ASSET_URN,
                }
            },
        ),
    )
    router.add("PUT", UPLOAD_URL, respond(201))
    return router
