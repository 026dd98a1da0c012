"""Normalization of handler return values into MCP result shapes."""

import base64
import json
from typing import Any

from mcpkit.lib.exceptions import InvalidPromptResultError, InvalidResourceResultError
from mcpkit.logic.mcp.models.mcp_types import (
    BlobResourceContents,
    CallToolResult,
    GetPromptResult,
    PromptMessage,
    ReadResourceResult,
    TextResourceContents,
)
from mcpkit.logic.mcp.models.registry_entry import PromptEntry, ResourceEntry


def tool_result(result: Any) -> CallToolResult:
    """Wrap a tool handler's return value.

    CallToolResult passes through; str is used as-is; dicts and lists become
    indented JSON; None becomes empty text; anything else is str()-ed.
    """
    if isinstance(result, CallToolResult):
        return result
    if isinstance(result, str):
        text = result
    elif result is None:
        text = ""
    elif isinstance(result, (dict, list)):
        text = json.dumps(result, indent=2, default=str)
    else:
        text = str(result)
    return CallToolResult.text(text)


def tool_error(exc: BaseException) -> CallToolResult:
    """Report a failed tool invocation as a result, not a protocol error."""
    return CallToolResult.text(f"Error: {exc}", is_error=True)


def prompt_result(entry: PromptEntry, result: Any) -> GetPromptResult:
    """Wrap a prompt handler's return value.

    Raises:
        InvalidPromptResultError: For anything other than str, a list of
            str/PromptMessage, or GetPromptResult
    """
    if isinstance(result, GetPromptResult):
        return result

    if isinstance(result, str):
        messages = [PromptMessage.user(result)]
    elif isinstance(result, (list, tuple)):
        messages = []
        for item in result:
            if isinstance(item, PromptMessage):
                messages.append(item)
            elif isinstance(item, str):
                messages.append(PromptMessage.user(item))
            else:
                raise InvalidPromptResultError(item)
    else:
        raise InvalidPromptResultError(result)

    return GetPromptResult(description=entry.description or None, messages=messages)


def _is_binary(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def resource_result(entry: ResourceEntry, result: Any) -> ReadResourceResult:
    """Wrap a resource handler's return value.

    Text is tagged with the resource's declared mime type; binary data is
    base64-encoded into a blob. File objects are read and classified the same
    way.

    Raises:
        InvalidResourceResultError: For any other return type
    """
    if isinstance(result, ReadResourceResult):
        return result

    if not isinstance(result, (str, bytes, bytearray, memoryview)) and callable(getattr(result, "read", None)):
        handle = result
        try:
            result = handle.read()
        finally:
            close = getattr(handle, "close", None)
            if callable(close):
                close()

    if isinstance(result, str):
        contents = TextResourceContents(uri=entry.uri, mime_type=entry.mime_type, text=result)
    elif _is_binary(result):
        blob = base64.b64encode(bytes(result)).decode("ascii")
        contents = BlobResourceContents(uri=entry.uri, mime_type=entry.mime_type, blob=blob)
    else:
        raise InvalidResourceResultError(result)

    return ReadResourceResult(contents=[contents])
