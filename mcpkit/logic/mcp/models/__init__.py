"""MCP data models and schemas."""

from .mcp_types import (
    BlobResourceContents,
    CallToolResult,
    GetPromptResult,
    ImageContent,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    ReadResourceResult,
    Resource,
    Role,
    TextContent,
    TextResourceContents,
    Tool,
)
from .registry_entry import EntryKind, PromptEntry, ResourceEntry, ToolEntry
from .schema import ParameterDescriptor, ParamType, SchemaDescriptor

__all__ = [
    "Tool",
    "ListToolsResult",
    "CallToolResult",
    "TextContent",
    "ImageContent",
    "Resource",
    "ListResourcesResult",
    "ReadResourceResult",
    "TextResourceContents",
    "BlobResourceContents",
    "Prompt",
    "PromptArgument",
    "PromptMessage",
    "GetPromptResult",
    "ListPromptsResult",
    "Role",
    "EntryKind",
    "ToolEntry",
    "PromptEntry",
    "ResourceEntry",
    "ParamType",
    "ParameterDescriptor",
    "SchemaDescriptor",
]
