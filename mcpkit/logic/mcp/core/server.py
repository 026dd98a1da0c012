"""
MCP Server

Entry point object for building a server: register tools, prompts and
resources fluently, then serve a stream pair or stdio.

    server = (
        McpServer("echo-server")
        .tool("echo", "Echo the input back", lambda text: text)
    )
    server.run()
"""

import asyncio
import dataclasses
import inspect
from typing import Any, Callable, Iterable, Optional, Union

from pydantic import BaseModel

from mcpkit.core.config import McpKitConfig
from mcpkit.core.lib_logger import get_component_logger, setup_logging
from mcpkit.lib.exceptions import RegistrationError
from mcpkit.logic.mcp.models.registry_entry import EntryKind, PromptEntry, ResourceEntry, ToolEntry
from mcpkit.logic.mcp.models.schema import ParameterDescriptor, SchemaDescriptor, accepts_var_keyword
from mcpkit.logic.mcp.protocol.capabilities import ServerCapabilities, ServerInfo
from mcpkit.logic.mcp.protocol.negotiator import CapabilityNegotiator
from mcpkit.logic.mcp.protocol.transport import ByteWriter, StreamTransport, open_stdio_transport

from .dispatcher import Dispatcher
from .registry import Registry
from .session_runner import SessionRunner

SchemaSpec = Union[SchemaDescriptor, Iterable[ParameterDescriptor], type[BaseModel], None]


def build_schema(handler: Callable[..., Any], spec: SchemaSpec = None) -> SchemaDescriptor:
    """
    Resolve the schema of a tool or prompt handler.

    Args:
        handler: The callable that will be invoked with keyword arguments
        spec: Explicit descriptor, ordered parameter list, pydantic model
            class, or None to read the handler signature

    Returns:
        Immutable schema descriptor
    """
    if spec is None:
        return SchemaDescriptor.from_callable(handler)

    if isinstance(spec, SchemaDescriptor):
        schema = spec
    elif inspect.isclass(spec) and issubclass(spec, BaseModel):
        schema = SchemaDescriptor.from_model(spec)
    else:
        schema = SchemaDescriptor.from_parameters(spec)

    if not schema.accepts_extra and accepts_var_keyword(handler):
        schema = dataclasses.replace(schema, accepts_extra=True)
    return schema


class McpServer:
    """
    MCP server built from registered tools, prompts and resources.

    Registration is only allowed before the first session reaches READY.
    Each call to serve() runs an independent session over the same registry.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        version: Optional[str] = None,
        config: Optional[McpKitConfig] = None,
    ):
        """
        Initialize server.

        Args:
            name: Server name reported at initialize (overrides config)
            version: Server version reported at initialize (overrides config)
            config: Server configuration, read from the environment by default
        """
        config = config or McpKitConfig()
        overrides = {}
        if name is not None:
            overrides["server_name"] = name
        if version is not None:
            overrides["server_version"] = version
        self.config = config.model_copy(update=overrides) if overrides else config

        self.registry = Registry()

    @property
    def name(self) -> str:
        return self.config.server_name

    @property
    def version(self) -> str:
        return self.config.server_version

    def tool(
        self,
        name: str,
        description: str,
        handler: Callable[..., Any],
        parameters: SchemaSpec = None,
    ) -> "McpServer":
        """
        Register a tool.

        Args:
            name: Unique tool name
            description: Human readable description
            handler: Sync or async callable invoked with the tool arguments
            parameters: Input schema, derived from the handler when omitted

        Returns:
            The server, for chaining
        """
        self._require_callable(EntryKind.TOOL, name, handler)
        self.registry.register_tool(
            ToolEntry(
                name=name,
                description=description,
                schema=build_schema(handler, parameters),
                handler=handler,
            )
        )
        return self

    def prompt(
        self,
        name: str,
        description: str,
        handler: Callable[..., Any],
        arguments: SchemaSpec = None,
    ) -> "McpServer":
        """
        Register a prompt.

        The handler returns a string, a list of strings or PromptMessage
        objects, or a GetPromptResult.
        """
        self._require_callable(EntryKind.PROMPT, name, handler)
        self.registry.register_prompt(
            PromptEntry(
                name=name,
                description=description,
                schema=build_schema(handler, arguments),
                handler=handler,
            )
        )
        return self

    def resource(
        self,
        uri: str,
        name: str,
        description: str = "",
        mime_type: str = "text/plain",
        handler: Optional[Callable[[], Any]] = None,
    ) -> "McpServer":
        """
        Register a resource.

        The handler takes no arguments and returns text, bytes, a readable
        file object, or a ReadResourceResult.
        """
        self._require_callable(EntryKind.RESOURCE, uri, handler)
        self.registry.register_resource(
            ResourceEntry(
                uri=uri,
                name=name,
                handler=handler,
                description=description,
                mime_type=mime_type,
            )
        )
        return self

    @staticmethod
    def _require_callable(kind: EntryKind, key: str, handler: Any) -> None:
        if not callable(handler):
            raise RegistrationError(
                f"Handler for {kind} '{key}' must be callable",
                {"kind": str(kind), "key": key},
            )

    def build_capabilities(self) -> ServerCapabilities:
        """Capabilities for the kinds that have at least one registered entry."""
        return ServerCapabilities.from_features(
            tools=self.registry.has(EntryKind.TOOL),
            prompts=self.registry.has(EntryKind.PROMPT),
            resources=self.registry.has(EntryKind.RESOURCE),
            tools_list_changed=self.config.tools_list_changed,
            prompts_list_changed=self.config.prompts_list_changed,
            resources_list_changed=self.config.resources_list_changed,
        )

    def create_session_runner(self, transport: StreamTransport) -> SessionRunner:
        """Wire a fresh session over the shared registry."""
        negotiator = CapabilityNegotiator(
            server_info=ServerInfo(name=self.name, version=self.version),
            capabilities=self.build_capabilities(),
            supported_versions=self.config.supported_protocol_versions,
        )
        negotiator.on_ready(lambda session: self.registry.freeze())

        dispatcher = Dispatcher(
            registry=self.registry,
            negotiator=negotiator,
            handler_timeout=self.config.handler_timeout,
        )
        return SessionRunner(dispatcher, transport, max_concurrency=self.config.max_concurrency)

    async def serve(self, reader: asyncio.StreamReader, writer: ByteWriter) -> SessionRunner:
        """
        Serve one session until the reader reaches EOF.

        Returns:
            The finished session runner
        """
        runner = self.create_session_runner(StreamTransport(reader, writer))
        await runner.run()
        return runner

    async def serve_stdio(self) -> SessionRunner:
        """Serve one session over stdin/stdout."""
        async with open_stdio_transport(limit=self.config.max_line_bytes) as transport:
            runner = self.create_session_runner(transport)
            await runner.run()
        return runner

    def run(self) -> None:
        """
        Configure logging and serve stdio until the client disconnects.

        Errors are logged rather than raised so a client sees a clean exit.
        """
        setup_logging(self.config)
        logger = get_component_logger("server", server=self.name)
        logger.info(f"Starting {self.name} v{self.version} with {len(self.registry)} registered entries")

        try:
            runner = asyncio.run(self.serve_stdio())
        except KeyboardInterrupt:
            logger.info("Server interrupted")
            return
        except Exception as e:
            logger.error(f"Server error: {e}", exc_info=self.config.debug)
            return

        if runner.fatal_error is not None:
            logger.error(f"Session ended with error: {runner.fatal_error.message}")
        else:
            logger.info("Server stopped")
