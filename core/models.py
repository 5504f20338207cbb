# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# Plain dataclasses for everything that flows between the dispatcher and the
# LinkedIn adapter.  None of them outlive a single request; the only
# process-wide value is the access token, which is just a string.
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class MediaKind(str, Enum):
    """Value of `shareMediaCategory` in a UGC post."""

    NONE = "NONE"
    ARTICLE = "ARTICLE"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class Visibility(str, Enum):
    """Value of `com.linkedin.ugc.MemberNetworkVisibility`."""

    PUBLIC = "PUBLIC"
    CONNECTIONS = "CONNECTIONS"


# -----------------------------------------------------------------------------
# ProfileInfo — the OpenID Connect userinfo record
# -----------------------------------------------------------------------------
# Fetched fresh on every call.  `sub` is the member id used to build the
# author URN (urn:li:person:<sub>) for posts and uploads.
# -----------------------------------------------------------------------------
@dataclass
class ProfileInfo:
    """The signed-in member as returned by GET /userinfo."""

    sub: str
    name: str
    given_name: str
    family_name: str
    picture: Optional[str] = None
    locale: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None

    @classmethod
    def from_userinfo(cls, data: dict) -> "ProfileInfo":
        return cls(
            sub=data.get("sub") or "",
            name=data.get("name") or "",
            given_name=data.get("given_name") or "",
            family_name=data.get("family_name") or "",
            picture=data.get("picture"),
            locale=data.get("locale"),
            email=data.get("email"),
            email_verified=data.get("email_verified"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out optional fields LinkedIn did not send."""
        result: dict[str, Any] = {
            "sub": self.sub,
            "name": self.name,
            "given_name": self.given_name,
            "family_name": self.family_name,
        }
        for key in ("picture", "locale", "email", "email_verified"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result

    @property
    def person_urn(self) -> str:
        return f"urn:li:person:{self.sub}"


# -----------------------------------------------------------------------------
# PostRequest — everything needed to publish one UGC post
# -----------------------------------------------------------------------------
@dataclass
class PostRequest:
    """Options for LinkedInAPI.create_post.

    media_url is used for ARTICLE posts, media_file (a local path) for
    IMAGE and VIDEO posts.
    """

    text: str
    media_kind: MediaKind = MediaKind.NONE
    media_url: Optional[str] = None
    media_file: Optional[str] = None
    media_title: Optional[str] = None
    media_description: Optional[str] = None
    visibility: Visibility = Visibility.PUBLIC


# -----------------------------------------------------------------------------
# OperationResult — what the dispatcher hands back to the protocol layer
# -----------------------------------------------------------------------------
@dataclass
class OperationResult:
    """Outcome of one tool call or resource read.

    `text` is the exact string placed in the response envelope; `payload`
    is the structured value it was rendered from (None on failure).
    """

    success: bool
    text: str
    payload: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    details: Any = None


# -----------------------------------------------------------------------------
# Catalogue descriptors — what the server advertises
# -----------------------------------------------------------------------------
# A ToolDescriptor is both the listing entry and the routing entry: it
# carries the argument fields and the handler that runs the call.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FieldSpec:
    """One tool argument.  `type` is a JSON-schema type name."""

    name: str
    type: str
    description: str
    required: bool = False
    default: Any = None
    enum: Optional[tuple[str, ...]] = None

    def schema(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum:
            result["enum"] = list(self.enum)
        if self.default is not None:
            result["default"] = self.default
        return result


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    handler: Callable[[Any, dict[str, Any]], Any]
    fields: tuple[FieldSpec, ...] = ()
    success_banner: Optional[str] = None   # prefix for write operations
    permission_note: Optional[str] = None  # appended to PermissionRequired failures

    @property
    def required(self) -> list[str]:
        return [f.name for f in self.fields if f.required]

    @property
    def input_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {f.name: f.schema() for f in self.fields},
        }
        if self.required:
            schema["required"] = self.required
        return schema

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)


@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str
    name: str
    description: str
    handler: Callable[[Any], Any]
    mime_type: str = "application/json"
    permission_note: Optional[str] = None
