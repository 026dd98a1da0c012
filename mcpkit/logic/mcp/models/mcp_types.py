"""
MCP Core Types

Models for MCP tools, resources, prompts and their results according to the
protocol spec.
https://modelcontextprotocol.io/
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class McpModel(BaseModel):
    """Base for wire models: camelCase aliases, absent fields omitted."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Tool(McpModel):
    """
    MCP Tool definition.

    Tools represent callable functions that can be invoked by clients.
    """

    name: str = Field(..., description="Unique tool identifier")
    description: str = Field("", description="Human-readable tool description")
    input_schema: dict[str, Any] = Field(
        ...,
        alias="inputSchema",
        description="JSON Schema for tool parameters",
    )


class Resource(McpModel):
    """
    MCP Resource definition.

    Resources represent data that can be read by clients (files, documents, etc).
    """

    uri: str = Field(..., description="Unique resource URI")
    name: str = Field(..., description="Human-readable resource name")
    description: Optional[str] = Field(
        None,
        description="Optional resource description",
    )
    mime_type: Optional[str] = Field(
        None,
        alias="mimeType",
        description="MIME type of the resource content",
    )


class PromptArgument(McpModel):
    """Argument accepted by a prompt template."""

    name: str = Field(..., description="Argument name")
    description: Optional[str] = Field(None, description="Argument description")
    required: bool = Field(False, description="Whether the argument must be supplied")


class Prompt(McpModel):
    """
    MCP Prompt template.

    Prompts are reusable message templates that clients can use.
    """

    name: str = Field(..., description="Unique prompt identifier")
    description: Optional[str] = Field(
        None,
        description="Prompt description",
    )
    arguments: list[PromptArgument] = Field(
        default_factory=list,
        description="Ordered list of prompt arguments",
    )


class TextContent(McpModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class ImageContent(McpModel):
    """Base64-encoded image content block."""

    type: Literal["image"] = "image"
    data: str = Field(..., description="Base64-encoded image data")
    mime_type: str = Field(..., alias="mimeType")


Content = Annotated[Union[TextContent, ImageContent], Field(discriminator="type")]


class CallToolResult(McpModel):
    """Result of tools/call. Tool failures are reported here, not as protocol errors."""

    content: list[Content] = Field(default_factory=list)
    is_error: bool = Field(False, alias="isError")

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "CallToolResult":
        """Create a single text block result."""
        return cls(content=[TextContent(text=text)], is_error=is_error)


class Role(str, Enum):
    """Speaker of a prompt message."""

    USER = "user"
    ASSISTANT = "assistant"

    def __str__(self) -> str:
        return self.value


class PromptMessage(McpModel):
    """
    Message within a prompt result.
    """

    role: Role = Field(Role.USER, description="Message role (user/assistant)")
    content: Content = Field(..., description="Message content")

    @classmethod
    def user(cls, text: str) -> "PromptMessage":
        """Create a user message wrapping plain text."""
        return cls(role=Role.USER, content=TextContent(text=text))


class GetPromptResult(McpModel):
    """
    Result when retrieving a prompt.
    """

    description: Optional[str] = Field(None, description="Prompt description")
    messages: list[PromptMessage] = Field(..., description="Prompt messages")


class TextResourceContents(McpModel):
    """Text contents of a resource."""

    uri: str = Field(..., description="Resource URI")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    text: str = Field(..., description="Text content")


class BlobResourceContents(McpModel):
    """Binary contents of a resource."""

    uri: str = Field(..., description="Resource URI")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    blob: str = Field(..., description="Base64-encoded binary content")


class ReadResourceResult(McpModel):
    """Result of resources/read."""

    contents: list[Union[TextResourceContents, BlobResourceContents]] = Field(...)


# List response models
class ListToolsResult(McpModel):
    """Response for tools/list method."""

    tools: list[Tool] = Field(..., description="Available tools")


class ListResourcesResult(McpModel):
    """Response for resources/list method."""

    resources: list[Resource] = Field(..., description="Available resources")


class ListPromptsResult(McpModel):
    """Response for prompts/list method."""

    prompts: list[Prompt] = Field(..., description="Available prompts")
