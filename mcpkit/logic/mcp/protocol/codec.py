"""
Line-delimited JSON-RPC codec.

Each message is one UTF-8 JSON object terminated by a newline.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from mcpkit.lib.exceptions import EncodeError, InvalidEnvelopeError, MalformedJsonError

from .message import (
    JSONRPC_VERSION,
    JsonRpcErrorResponse,
    JsonRpcMessage,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
)


def _recover_id(payload: Any) -> Optional[Any]:
    """Return the payload's id if it is a usable request id."""
    if not isinstance(payload, dict):
        return None
    request_id = payload.get("id")
    if isinstance(request_id, bool):
        return None
    if isinstance(request_id, (str, int)):
        return request_id
    return None


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"]) or "message"
    return f"{location}: {error['msg']}"


def decode(line: bytes) -> JsonRpcMessage:
    """Decode one line into a JSON-RPC message.

    Args:
        line: Raw bytes of a single line, with or without the trailing newline

    Returns:
        The decoded request, notification, response or error response

    Raises:
        MalformedJsonError: If the line is not valid UTF-8 JSON
        InvalidEnvelopeError: If the JSON is not an unambiguous JSON-RPC 2.0 message
    """
    try:
        payload = json.loads(line.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedJsonError(f"Invalid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise MalformedJsonError(f"Invalid JSON: {e.msg} at position {e.pos}") from e
    except RecursionError as e:
        raise MalformedJsonError("Invalid JSON: nesting too deep") from e

    if isinstance(payload, list):
        raise InvalidEnvelopeError("Batch messages are not supported")
    if not isinstance(payload, dict):
        raise InvalidEnvelopeError("Message must be a JSON object")

    request_id = _recover_id(payload)

    if payload.get("jsonrpc") != JSONRPC_VERSION:
        raise InvalidEnvelopeError("Missing or invalid 'jsonrpc' member, expected \"2.0\"", request_id)

    has_method = "method" in payload
    has_id = "id" in payload
    has_result = "result" in payload
    has_error = "error" in payload

    if has_method and (has_result or has_error):
        raise InvalidEnvelopeError("Message cannot carry both 'method' and 'result'/'error'", request_id)
    if has_result and has_error:
        raise InvalidEnvelopeError("Response cannot carry both 'result' and 'error'", request_id)

    if has_method:
        model = JsonRpcRequest if has_id else JsonRpcNotification
    elif has_result:
        model = JsonRpcResponse
    elif has_error:
        model = JsonRpcErrorResponse
    else:
        raise InvalidEnvelopeError("Message is neither a request, notification nor response", request_id)

    if model is not JsonRpcNotification and not has_id:
        raise InvalidEnvelopeError("Response is missing 'id'", request_id)

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidEnvelopeError(f"Invalid {model.__name__}: {_first_error(e)}", request_id) from e


def encode(message: JsonRpcMessage) -> bytes:
    """Encode a message as a newline-terminated UTF-8 JSON line.

    Raises:
        EncodeError: If the message contains values that are not JSON-serializable
    """
    wire = message.to_wire()
    try:
        body = json.dumps(wire, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
        try:
            data = body.encode("utf-8")
        except UnicodeEncodeError:
            # Lone surrogates have no UTF-8 form; \u escapes carry them intact
            data = json.dumps(wire, ensure_ascii=True, separators=(",", ":"), allow_nan=False).encode("ascii")
    except (TypeError, ValueError, RecursionError) as e:
        raise EncodeError(f"Failed to encode {type(message).__name__}: {e}") from e
    return data + b"\n"
