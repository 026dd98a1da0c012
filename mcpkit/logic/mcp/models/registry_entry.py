"""Registry entries: public metadata plus the handler that serves it."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .mcp_types import Prompt, Resource, Tool
from .schema import SchemaDescriptor


class EntryKind(str, Enum):
    """Kinds of registry entries."""

    TOOL = "tool"
    PROMPT = "prompt"
    RESOURCE = "resource"

    def __str__(self) -> str:
        return self.value

    @property
    def plural(self) -> str:
        """Collection name used in method names (tools/list, ...)."""
        return f"{self.value}s"


@dataclass(frozen=True)
class ToolEntry:
    """Registered tool."""

    name: str
    description: str
    schema: SchemaDescriptor
    handler: Callable[..., Any] = field(repr=False, compare=False)

    kind = EntryKind.TOOL

    @property
    def key(self) -> str:
        return self.name

    def to_metadata(self) -> Tool:
        return Tool(name=self.name, description=self.description, input_schema=self.schema.to_json_schema())


@dataclass(frozen=True)
class PromptEntry:
    """Registered prompt."""

    name: str
    description: str
    schema: SchemaDescriptor
    handler: Callable[..., Any] = field(repr=False, compare=False)

    kind = EntryKind.PROMPT

    @property
    def key(self) -> str:
        return self.name

    def to_metadata(self) -> Prompt:
        return Prompt(
            name=self.name,
            description=self.description or None,
            arguments=self.schema.to_prompt_arguments(),
        )


@dataclass(frozen=True)
class ResourceEntry:
    """Registered resource."""

    uri: str
    name: str
    handler: Callable[[], Any] = field(repr=False, compare=False)
    description: str = ""
    mime_type: Optional[str] = "text/plain"

    kind = EntryKind.RESOURCE

    @property
    def key(self) -> str:
        return self.uri

    def to_metadata(self) -> Resource:
        return Resource(
            uri=self.uri,
            name=self.name,
            description=self.description or None,
            mime_type=self.mime_type,
        )
