# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Two families of failure flow through the server:
#
#   CALLER ERRORS (the request itself is wrong)
#     - InvalidArgumentError   missing / mistyped argument
#     - UnknownToolError       no tool with that name
#     - UnknownResourceError   no resource with that URI
#   These fail the protocol call outright.
#
#   OPERATION ERRORS (the request was fine, LinkedIn said no)
#     - UpstreamError            non-2xx status or network failure
#     - PermissionRequiredError  capability needs partner approval
#   The dispatcher turns these into normal "❌ ..." text content so the
#   agent can tell "I called it wrong" apart from "it was declined".
# =============================================================================

from typing import Any, Optional


class LinkedInMCPError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(LinkedInMCPError):
    """Required startup configuration is missing."""


class InvalidArgumentError(LinkedInMCPError):
    """A tool argument is missing or has the wrong type."""


class UnknownToolError(LinkedInMCPError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownResourceError(LinkedInMCPError):
    def __init__(self, uri: str):
        super().__init__(f"Unknown resource: {uri}")
        self.uri = uri


class UpstreamError(LinkedInMCPError):
    """A LinkedIn API call failed.

    Carries the HTTP status (None for network failures) and the decoded
    error body when LinkedIn sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class PermissionRequiredError(LinkedInMCPError):
    """The capability exists on LinkedIn but is closed to standard apps."""
