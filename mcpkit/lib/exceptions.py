"""Exception hierarchy for registration, protocol and transport failures."""

from typing import Any, Dict, List, Optional, Union

RequestId = Union[str, int]


class McpKitError(Exception):
    """Base exception for all mcpkit errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize mcpkit error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for diagnostics."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class RegistrationError(McpKitError):
    """Raised when a tool, prompt or resource cannot be registered."""


class DuplicateNameError(RegistrationError):
    """Raised when a name or uri is already registered for its kind."""

    def __init__(self, kind: str, key: str):
        """Initialize duplicate name error."""
        super().__init__(
            f"Duplicate {kind}: {key}",
            {"kind": kind, "key": key}
        )
        self.kind = kind
        self.key = key


class DecodeError(McpKitError):
    """Raised when an inbound line cannot be decoded into a JSON-RPC message."""

    code: int = -32600

    def __init__(self, message: str, request_id: Optional[RequestId] = None):
        """Initialize decode error.

        Args:
            message: Human-readable reason
            request_id: Id recovered from the payload, if any
        """
        super().__init__(message, {"request_id": request_id})
        self.request_id = request_id


class MalformedJsonError(DecodeError):
    """Raised when the line is not valid UTF-8 JSON."""

    code = -32700


class InvalidEnvelopeError(DecodeError):
    """Raised when the JSON is not a well-formed JSON-RPC 2.0 envelope."""

    code = -32600


class EncodeError(McpKitError):
    """Raised when an outbound message cannot be serialized."""


class TransportError(McpKitError):
    """Raised when the underlying byte stream fails."""


class ProtocolError(McpKitError):
    """Error that is reported to the client as a JSON-RPC error response."""

    code: int = -32603

    def __init__(self, message: str, data: Optional[Any] = None, code: Optional[int] = None):
        """Initialize protocol error.

        Args:
            message: Error message sent to the client
            data: Optional structured error data
            code: Override for the class error code
        """
        super().__init__(message, {"data": data} if data is not None else None)
        if code is not None:
            self.code = code
        self.data = data

    def to_error(self) -> Dict[str, Any]:
        """Build the JSON-RPC error object."""
        error: Dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class NotInitializedError(ProtocolError):
    """Raised when a method other than initialize arrives before the handshake."""

    code = -32002

    def __init__(self, method: str):
        super().__init__(f"Server not initialized: '{method}' requires a completed initialize handshake")
        self.method = method


class AlreadyInitializedError(ProtocolError):
    """Raised when initialize is repeated on a ready session."""

    code = -32600

    def __init__(self):
        super().__init__("Server already initialized")


class UnsupportedProtocolVersionError(ProtocolError):
    """Raised when the client requests a protocol version the server cannot speak."""

    code = -32602

    def __init__(self, requested: Any, supported: List[str]):
        super().__init__(
            f"Unsupported protocol version: {requested}",
            data={"supported": list(supported), "requested": requested},
        )
        self.requested = requested
        self.supported = list(supported)


class MethodNotFoundError(ProtocolError):
    """Raised for an unrecognized method name."""

    code = -32601

    def __init__(self, method: str):
        super().__init__(f"Method '{method}' not found")
        self.method = method


class InvalidParamsError(ProtocolError):
    """Raised when request params are missing or malformed."""

    code = -32602


class UnknownToolError(InvalidParamsError):
    """Raised when tools/call names an unregistered tool."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownPromptError(InvalidParamsError):
    """Raised when prompts/get names an unregistered prompt."""

    def __init__(self, name: str):
        super().__init__(f"Unknown prompt: {name}")
        self.name = name


class UnknownResourceError(InvalidParamsError):
    """Raised when resources/read names an unregistered uri."""

    def __init__(self, uri: str):
        super().__init__(f"Unknown resource: {uri}")
        self.uri = uri


def _type_name(value: Any) -> str:
    return type(value).__name__


class InvalidPromptResultError(ProtocolError):
    """Raised when a prompt handler returns something that is not a message variant."""

    code = -32603

    def __init__(self, result: Any):
        super().__init__(
            "Invalid prompt handler result: expected str, list of messages, "
            f"or GetPromptResult, got {_type_name(result)}"
        )


class InvalidResourceResultError(ProtocolError):
    """Raised when a resource handler returns something that is not a content variant."""

    code = -32603

    def __init__(self, result: Any):
        super().__init__(
            "Invalid resource handler result: expected str, bytes, file object, "
            f"or ReadResourceResult, got {_type_name(result)}"
        )


class HandlerTimeoutError(ProtocolError):
    """Raised when a prompt or resource handler exceeds the configured timeout."""

    code = -32000

    def __init__(self, kind: str, key: str, timeout: float):
        super().__init__(
            f"{kind.capitalize()} '{key}' timed out after {timeout:g}s",
            data={"timeout": timeout},
        )
        self.kind = kind
        self.key = key
        self.timeout = timeout
