# =============================================================================
# core/dispatcher.py  —  Tool Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Takes a tool name + raw arguments (or a resource URI), checks them
#   against the catalogue, runs the handler and renders the result as the
#   text that goes into the protocol response.
#
# THE FLOW:
#   call_tool("create_text_post", {"text": "hi"})
#     1. look up the descriptor          → UnknownToolError if absent
#     2. check & default the arguments   → InvalidArgumentError, no HTTP yet
#     3. run the handler against LinkedInAPI
#     4. render:
#          success            "<banner>\n<json>"  or just "<json>"
#          UpstreamError      "❌ <message>"
#          PermissionRequired "❌ <message>\n\nNote: <note>"
#
# WHICH ERRORS ESCAPE?
#   Only caller mistakes (unknown tool/resource, bad arguments).  Anything
#   LinkedIn-side becomes ordinary content with a ❌ marker.
# =============================================================================

import json
import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from core.catalog import RESOURCES, TOOLS
from core.errors import (
    InvalidArgumentError,
    PermissionRequiredError,
    UnknownResourceError,
    UnknownToolError,
    UpstreamError,
)
from core.models import OperationResult, ResourceDescriptor, ToolDescriptor

# ANSI color codes for terminal output
_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status messages
_RED = "\033[31m"      # Declined / failed operations
_RESET = "\033[0m"

FAILURE_MARKER = "❌"


def to_json(value: Any) -> str:
    """Pretty-print a payload the way it appears in response content."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _matches_type(value: Any, json_type: str) -> bool:
    if json_type == "string":
        return isinstance(value, str)
    if json_type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    raise ValueError(f"unsupported field type {json_type!r}")


def check_arguments(tool: ToolDescriptor, arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Validate raw arguments against a tool's fields.

    Required fields must be present with the right type.  Optional fields
    of the wrong type (or missing) fall back to their default.  Enum fields
    must hold one of their allowed values.

    Returns:
        A new dict with exactly one entry per declared field.

    Raises:
        InvalidArgumentError: on a missing/mistyped required field or an
            enum value outside the allowed set.
    """
    if not isinstance(arguments, Mapping):
        raise InvalidArgumentError("arguments must be an object")

    checked: dict[str, Any] = {}
    for spec in tool.fields:
        value = arguments.get(spec.name)
        if not _matches_type(value, spec.type):
            if spec.required:
                raise InvalidArgumentError(f"{spec.name} must be a {spec.type}")
            value = spec.default
        if spec.enum and value is not None and value not in spec.enum:
            allowed = ", ".join(spec.enum)
            raise InvalidArgumentError(f"{spec.name} must be one of: {allowed}")
        checked[spec.name] = value
    return checked


class ToolDispatcher:
    """Routes tool calls and resource reads to a LinkedInAPI."""

    def __init__(
        self,
        api,
        logger: Optional[logging.Logger] = None,
        tools: Iterable[ToolDescriptor] = TOOLS,
        resources: Iterable[ResourceDescriptor] = RESOURCES,
    ):
        self._api = api
        self._logger = logger or logging.getLogger(__name__)
        self._tools = {tool.name: tool for tool in tools}
        self._resources = {resource.uri: resource for resource in resources}

    # --- logging ----------------------------------------------------------
    def _log_request(self, name: str, params: Mapping[str, Any]) -> None:
        param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
        self._logger.info(f"{_CYAN}{name} called with: {param_str}{_RESET}")

    def _log_status(self, message: str) -> None:
        self._logger.info(f"{_YELLOW}  → {message}{_RESET}")

    def _log_response(self, name: str, result: OperationResult) -> OperationResult:
        if result.success:
            body = json.dumps(result.payload, separators=(",", ":"), ensure_ascii=False, default=str)
            self._logger.info(f"{_GREEN}  ← {name} response: {body}{_RESET}")
        else:
            self._logger.warning(f"{_RED}  ← {name} failed: {result.error}{_RESET}")
        return result

    # --- catalogue --------------------------------------------------------
    def list_tools(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def list_resources(self) -> list[ResourceDescriptor]:
        return list(self._resources.values())

    # --- tools ------------------------------------------------------------
    def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> OperationResult:
        """Run one tool.

        Raises:
            UnknownToolError: if `name` is not in the catalogue.
            InvalidArgumentError: if the arguments fail the tool's checks.
                No request reaches LinkedIn in that case.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        raw = {} if arguments is None else arguments
        self._log_request(name, raw if isinstance(raw, Mapping) else {"arguments": raw})
        args = check_arguments(tool, raw)

        try:
            payload = tool.handler(self._api, args)
        except PermissionRequiredError as exc:
            note = tool.permission_note
            text = f"{FAILURE_MARKER} {exc}" + (f"\n\nNote: {note}" if note else "")
            return self._log_response(name, OperationResult(success=False, text=text, error=str(exc)))
        except UpstreamError as exc:
            return self._log_response(
                name,
                OperationResult(
                    success=False,
                    text=f"{FAILURE_MARKER} {exc}",
                    error=str(exc),
                    status_code=exc.status_code,
                    details=exc.details,
                ),
            )

        rendered = to_json(payload)
        if tool.success_banner:
            rendered = f"{tool.success_banner}\n{rendered}"
        return self._log_response(name, OperationResult(success=True, text=rendered, payload=payload))

    # --- resources --------------------------------------------------------
    def read_resource(self, uri: str) -> OperationResult:
        """Read one resource; the content is always returned inline as JSON.

        Raises:
            UnknownResourceError: if `uri` is not in the catalogue.
        """
        resource = self._resources.get(uri)
        if resource is None:
            raise UnknownResourceError(uri)

        self._log_request(uri, {})
        try:
            payload = resource.handler(self._api)
        except PermissionRequiredError as exc:
            body: dict[str, Any] = {"error": str(exc)}
            if resource.permission_note:
                body["note"] = resource.permission_note
            self._log_status(f"{uri} is restricted")
            return self._log_response(uri, OperationResult(success=False, text=to_json(body), error=str(exc)))
        except UpstreamError as exc:
            body = {"error": str(exc), "status_code": exc.status_code}
            return self._log_response(
                uri,
                OperationResult(
                    success=False,
                    text=to_json(body),
                    error=str(exc),
                    status_code=exc.status_code,
                    details=exc.details,
                ),
            )

        return self._log_response(uri, OperationResult(success=True, text=to_json(payload), payload=payload))
