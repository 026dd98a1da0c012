"""mcpkit - build Model Context Protocol servers from plain Python callables."""

from mcpkit.core.config import McpKitConfig
from mcpkit.lib.exceptions import McpKitError, ProtocolError, RegistrationError
from mcpkit.logic.mcp.core.server import McpServer
from mcpkit.logic.mcp.models.mcp_types import (
    BlobResourceContents,
    CallToolResult,
    GetPromptResult,
    PromptMessage,
    ReadResourceResult,
    Role,
    TextContent,
    TextResourceContents,
)
from mcpkit.logic.mcp.models.schema import ParameterDescriptor, ParamType, SchemaDescriptor
from mcpkit.version import __version__

__all__ = [
    "__version__",
    "McpServer",
    "McpKitConfig",
    "McpKitError",
    "ProtocolError",
    "RegistrationError",
    "ParameterDescriptor",
    "ParamType",
    "SchemaDescriptor",
    "CallToolResult",
    "TextContent",
    "GetPromptResult",
    "PromptMessage",
    "Role",
    "ReadResourceResult",
    "TextResourceContents",
    "BlobResourceContents",
]
