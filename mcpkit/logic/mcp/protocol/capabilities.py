"""
MCP Capability Negotiation Models

Implements server and client capability models for the MCP protocol.
Used during initialization handshake to declare supported features.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CapabilityModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ToolsCapability(_CapabilityModel):
    """Tools capability configuration."""

    list_changed: bool = Field(
        default=True,
        alias="listChanged",
        description="Server supports notifications when tools list changes",
    )


class ResourcesCapability(_CapabilityModel):
    """Resources capability configuration."""

    subscribe: bool = Field(
        default=False,
        description="Server supports resource subscriptions for real-time updates",
    )
    list_changed: bool = Field(
        default=True,
        alias="listChanged",
        description="Server supports notifications when resources list changes",
    )


class PromptsCapability(_CapabilityModel):
    """Prompts capability configuration."""

    list_changed: bool = Field(
        default=True,
        alias="listChanged",
        description="Server supports notifications when prompts list changes",
    )


class ServerCapabilities(_CapabilityModel):
    """Server capabilities exposed during initialization."""

    tools: Optional[ToolsCapability] = Field(
        default=None,
        description="Tools capability (function calling)",
    )
    resources: Optional[ResourcesCapability] = Field(
        default=None,
        description="Resources capability (data access)",
    )
    prompts: Optional[PromptsCapability] = Field(
        default=None,
        description="Prompts capability (prompt templates)",
    )

    @classmethod
    def from_features(
        cls,
        tools: bool,
        prompts: bool,
        resources: bool,
        tools_list_changed: bool = True,
        prompts_list_changed: bool = True,
        resources_list_changed: bool = True,
    ) -> "ServerCapabilities":
        """Union of the features enabled at startup; absent kinds are omitted."""
        return cls(
            tools=ToolsCapability(list_changed=tools_list_changed) if tools else None,
            prompts=PromptsCapability(list_changed=prompts_list_changed) if prompts else None,
            resources=ResourcesCapability(list_changed=resources_list_changed) if resources else None,
        )

    def list_changed_enabled(self, kind: str) -> bool:
        """Whether listChanged notifications were advertised for tools/prompts/resources."""
        capability = getattr(self, kind, None)
        return bool(capability is not None and capability.list_changed)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ClientCapabilities(_CapabilityModel):
    """Client capabilities received during initialization."""

    experimental: Optional[dict] = Field(
        default=None,
        description="Experimental capabilities (client-specific)",
    )
    roots: Optional[dict] = Field(
        default=None,
        description="Root paths for file access",
    )
    sampling: Optional[dict] = Field(
        default=None,
        description="Client supports sampling requests",
    )


class ServerInfo(BaseModel):
    """Server information exposed during initialization."""

    name: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")


class InitializeRequest(BaseModel):
    """MCP initialize request parameters."""

    protocol_version: str = Field(
        alias="protocolVersion",
        description="MCP protocol version",
    )
    capabilities: ClientCapabilities = Field(
        default_factory=ClientCapabilities,
        description="Client capabilities",
    )
    client_info: dict = Field(
        default_factory=dict,
        alias="clientInfo",
        description="Client information",
    )

    model_config = ConfigDict(populate_by_name=True)


class InitializeResponse(BaseModel):
    """MCP initialize response result."""

    protocol_version: str = Field(
        alias="protocolVersion",
        description="MCP protocol version",
    )
    capabilities: ServerCapabilities = Field(
        ...,
        description="Server capabilities",
    )
    server_info: ServerInfo = Field(
        alias="serverInfo",
        description="Server information",
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def create(
        cls,
        server_name: str,
        server_version: str,
        capabilities: ServerCapabilities,
        protocol_version: str,
    ) -> "InitializeResponse":
        """Create an initialize response."""
        return cls(
            protocol_version=protocol_version,
            capabilities=capabilities,
            server_info=ServerInfo(name=server_name, version=server_version),
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
