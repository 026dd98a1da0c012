"""
MCP Protocol Layer

Implements the Model Context Protocol (MCP) wire format and lifecycle.
https://modelcontextprotocol.io/
"""

from .message import (
    JsonRpcError,
    JsonRpcErrorResponse,
    JsonRpcMessage,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    McpErrorCode,
)
from .codec import decode, encode
from .capabilities import (
    ClientCapabilities,
    InitializeRequest,
    InitializeResponse,
    PromptsCapability,
    ResourcesCapability,
    ServerCapabilities,
    ServerInfo,
    ToolsCapability,
)
from .session import Session, SessionState
from .negotiator import CapabilityNegotiator
from .transport import StreamTransport, open_stdio_transport

__all__ = [
    # Message types
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcErrorResponse",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcMessage",
    "McpErrorCode",
    # Codec
    "decode",
    "encode",
    # Capabilities
    "ServerCapabilities",
    "ClientCapabilities",
    "ToolsCapability",
    "ResourcesCapability",
    "PromptsCapability",
    "ServerInfo",
    "InitializeRequest",
    "InitializeResponse",
    # Lifecycle
    "Session",
    "SessionState",
    "CapabilityNegotiator",
    # Transport
    "StreamTransport",
    "open_stdio_transport",
]
