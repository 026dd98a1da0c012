"""
JSON-RPC 2.0 Message Models for MCP Protocol

Implements message structures according to JSON-RPC 2.0 specification.
https://www.jsonrpc.org/specification
"""

from enum import IntEnum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

# Integer ids stay integers and string ids stay strings; bools and floats are rejected
RequestId = Union[StrictStr, StrictInt]

JSONRPC_VERSION = "2.0"


class McpErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes plus MCP-specific codes."""

    # Standard JSON-RPC 2.0 errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # MCP-specific errors
    SERVER_NOT_INITIALIZED = -32002
    REQUEST_TIMEOUT = -32000


class _Envelope(BaseModel):
    jsonrpc: str = Field(JSONRPC_VERSION, description="JSON-RPC version")

    @field_validator("jsonrpc")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Ensure JSON-RPC version is 2.0."""
        if v != JSONRPC_VERSION:
            raise ValueError("jsonrpc version must be '2.0'")
        return v


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: StrictInt = Field(..., description="Error code")
    message: StrictStr = Field(..., description="Error message")
    data: Optional[Any] = Field(None, description="Additional error data")

    @classmethod
    def from_code(cls, code: McpErrorCode, message: Optional[str] = None, data: Optional[Any] = None) -> "JsonRpcError":
        """Create error from standard code."""
        default_messages = {
            McpErrorCode.PARSE_ERROR: "Parse error",
            McpErrorCode.INVALID_REQUEST: "Invalid request",
            McpErrorCode.METHOD_NOT_FOUND: "Method not found",
            McpErrorCode.INVALID_PARAMS: "Invalid params",
            McpErrorCode.INTERNAL_ERROR: "Internal error",
            McpErrorCode.SERVER_NOT_INITIALIZED: "Server not initialized",
            McpErrorCode.REQUEST_TIMEOUT: "Request timeout",
        }
        return cls(
            code=int(code),
            message=message or default_messages.get(code, "Unknown error"),
            data=data,
        )

    def to_wire(self) -> dict[str, Any]:
        """Wire form; `data` is omitted when absent."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class JsonRpcRequest(_Envelope):
    """JSON-RPC 2.0 request message."""

    id: RequestId = Field(..., description="Request ID")
    method: StrictStr = Field(..., description="Method name")
    params: Optional[Union[dict[str, Any], list[Any]]] = Field(None, description="Method parameters")

    def to_wire(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method}
        if self.params is not None:
            message["params"] = self.params
        return message


class JsonRpcNotification(_Envelope):
    """JSON-RPC 2.0 notification message (no response expected)."""

    method: StrictStr = Field(..., description="Method name")
    params: Optional[Union[dict[str, Any], list[Any]]] = Field(None, description="Method parameters")

    def to_wire(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not None:
            message["params"] = self.params
        return message


class JsonRpcResponse(_Envelope):
    """JSON-RPC 2.0 success response message."""

    id: RequestId = Field(..., description="Request ID")
    result: Any = Field(..., description="Result data")

    @classmethod
    def success(cls, request_id: Union[str, int], result: Any) -> "JsonRpcResponse":
        """Create a success response."""
        return cls(id=request_id, result=result)

    def to_wire(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}


class JsonRpcErrorResponse(_Envelope):
    """JSON-RPC 2.0 error response; id is null when the request was ill-formed."""

    id: Optional[RequestId] = Field(..., description="Request ID or null")
    error: JsonRpcError = Field(..., description="Error object")

    @classmethod
    def error_response(
        cls,
        request_id: Optional[Union[str, int]],
        code: McpErrorCode,
        message: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "JsonRpcErrorResponse":
        """Create an error response."""
        return cls(
            id=request_id,
            error=JsonRpcError.from_code(code, message, data),
        )

    @classmethod
    def from_error(cls, request_id: Optional[Union[str, int]], error: dict[str, Any]) -> "JsonRpcErrorResponse":
        """Create an error response from an error object dict."""
        return cls(id=request_id, error=JsonRpcError(**error))

    def to_wire(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "error": self.error.to_wire()}


# Type alias for any JSON-RPC message
JsonRpcMessage = Union[JsonRpcRequest, JsonRpcNotification, JsonRpcResponse, JsonRpcErrorResponse]
