"""
MCP Dispatcher

Routes JSON-RPC requests to built-in MCP methods backed by the registry.
Manages the initialization gate and converts failures into error responses.
"""

import asyncio
import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel, Field, StrictStr

from mcpkit.lib.exceptions import HandlerTimeoutError, InvalidParamsError, MethodNotFoundError, ProtocolError
from mcpkit.logic.mcp.models.mcp_types import ListPromptsResult, ListResourcesResult, ListToolsResult
from mcpkit.logic.mcp.models.registry_entry import EntryKind
from mcpkit.logic.mcp.protocol.message import (
    JsonRpcErrorResponse,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    McpErrorCode,
)
from mcpkit.logic.mcp.protocol.negotiator import CapabilityNegotiator

from . import results
from .registry import Registry

logger = logging.getLogger(__name__)

MethodHandler = Callable[[dict[str, Any]], Awaitable[Any]]
NotificationHandler = Callable[[dict[str, Any]], Awaitable[None]]


def _is_async_callable(handler: Any) -> bool:
    """Coroutine functions, including partials of them and objects with an async __call__."""
    while isinstance(handler, functools.partial):
        handler = handler.func
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(getattr(handler, "__call__", None))


class CallToolParams(BaseModel):
    """Params of tools/call."""

    name: StrictStr
    arguments: Optional[dict[str, Any]] = Field(default=None)


class GetPromptParams(BaseModel):
    """Params of prompts/get."""

    name: StrictStr
    arguments: Optional[dict[str, Any]] = Field(default=None)


class ReadResourceParams(BaseModel):
    """Params of resources/read."""

    uri: StrictStr


class Dispatcher:
    """
    MCP method dispatcher.

    Every request yields exactly one response or error response carrying the
    request id. Tool handler failures are successful results flagged with
    isError; everything else that goes wrong is a protocol error.
    """

    def __init__(
        self,
        registry: Registry,
        negotiator: CapabilityNegotiator,
        handler_timeout: Optional[float] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            registry: Tools, prompts and resources to serve
            negotiator: Session lifecycle gate
            handler_timeout: Per-call timeout in seconds, None to disable
        """
        self.registry = registry
        self.negotiator = negotiator
        self.handler_timeout = handler_timeout

        # Method handler registry
        self._handlers: dict[str, MethodHandler] = {}
        self._notification_handlers: dict[str, NotificationHandler] = {}

        # Register built-in methods
        self.register_method("initialize", self._handle_initialize)
        self.register_method("ping", self._handle_ping)
        self.register_method("tools/list", self._handle_tools_list)
        self.register_method("tools/call", self._handle_tools_call)
        self.register_method("prompts/list", self._handle_prompts_list)
        self.register_method("prompts/get", self._handle_prompts_get)
        self.register_method("resources/list", self._handle_resources_list)
        self.register_method("resources/read", self._handle_resources_read)
        self.register_notification("notifications/initialized", self._handle_initialized)

    def register_method(self, method_name: str, handler: MethodHandler) -> None:
        """
        Register a method handler.

        Args:
            method_name: Name of the MCP method
            handler: Async function receiving the params object
        """
        self._handlers[method_name] = handler
        logger.debug(f"Registered handler for method: {method_name}")

    def register_notification(self, method_name: str, handler: NotificationHandler) -> None:
        """Register a handler for an inbound notification."""
        self._notification_handlers[method_name] = handler

    async def handle_request(self, request: JsonRpcRequest) -> Union[JsonRpcResponse, JsonRpcErrorResponse]:
        """
        Handle an incoming JSON-RPC request.

        Args:
            request: The JSON-RPC request to handle

        Returns:
            JsonRpcResponse with result, or JsonRpcErrorResponse
        """
        method = request.method
        logger.debug(f"Request {request.id!r}: {method}")

        try:
            if method != "initialize":
                self.negotiator.require_ready(method)

            handler = self._handlers.get(method)
            if handler is None:
                raise MethodNotFoundError(method)

            result = await handler(self._params(request.params))
            return JsonRpcResponse.success(request.id, result)

        except ProtocolError as e:
            logger.warning(f"{method} failed: {e.message}")
            return JsonRpcErrorResponse.from_error(request.id, e.to_error())

        except ValueError as e:
            # Invalid parameters
            logger.warning(f"Invalid params for {method}: {e}")
            return JsonRpcErrorResponse.error_response(
                request_id=request.id,
                code=McpErrorCode.INVALID_PARAMS,
                message=str(e),
            )

        except Exception as e:
            # Internal error
            logger.exception(f"Error handling {method}: {e}")
            return JsonRpcErrorResponse.error_response(
                request_id=request.id,
                code=McpErrorCode.INTERNAL_ERROR,
                message=f"Internal error: {str(e)}",
            )

    async def handle_notification(self, notification: JsonRpcNotification) -> None:
        """
        Handle an incoming notification. Never produces a response.
        """
        method = notification.method

        if not self.negotiator.is_initialized:
            logger.warning(f"Dropping notification {method} received before initialization")
            return

        handler = self._notification_handlers.get(method)
        if handler is None:
            logger.debug(f"Ignoring unhandled notification: {method}")
            return

        try:
            await handler(self._params(notification.params))
        except Exception as e:
            logger.exception(f"Error handling notification {method}: {e}")

    @staticmethod
    def _params(params: Any) -> dict[str, Any]:
        if params is None:
            return {}
        if not isinstance(params, dict):
            raise InvalidParamsError("params must be an object")
        return params

    async def _invoke(self, kind: EntryKind, key: str, handler: Callable[..., Any], kwargs: dict[str, Any]) -> Any:
        """Run a handler, in a worker thread when it is synchronous, under the timeout."""

        async def call() -> Any:
            if _is_async_callable(handler):
                result = await handler(**kwargs)
            else:
                result = await asyncio.to_thread(handler, **kwargs)
            # Sync callables may still hand back an awaitable
            if inspect.isawaitable(result):
                result = await result
            return result

        try:
            if self.handler_timeout is None:
                return await call()
            return await asyncio.wait_for(call(), timeout=self.handler_timeout)
        except asyncio.TimeoutError:
            raise HandlerTimeoutError(str(kind), key, self.handler_timeout) from None

    async def _invoke_protocol(self, kind: EntryKind, key: str, handler: Callable[..., Any], kwargs: dict[str, Any]) -> Any:
        """Invoke a prompt or resource handler; its failures are internal errors."""
        try:
            return await self._invoke(kind, key, handler, kwargs)
        except ProtocolError:
            raise
        except Exception as e:
            logger.exception(f"{kind.value.capitalize()} {key} failed: {e}")
            raise ProtocolError(f"{kind.value.capitalize()} '{key}' failed: {e}") from e

    async def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        return self.negotiator.initialize(params)

    async def _handle_initialized(self, params: dict[str, Any]) -> None:
        """Client confirms successful initialization."""
        logger.info("Client confirmed initialization")

    async def _handle_ping(self, params: dict[str, Any]) -> dict[str, Any]:
        """Simple keep-alive check."""
        return {}

    async def _handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        tools = [entry.to_metadata() for entry in self.registry.list(EntryKind.TOOL)]
        return ListToolsResult(tools=tools).to_wire()

    async def _handle_prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        prompts = [entry.to_metadata() for entry in self.registry.list(EntryKind.PROMPT)]
        return ListPromptsResult(prompts=prompts).to_wire()

    async def _handle_resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        resources = [entry.to_metadata() for entry in self.registry.list(EntryKind.RESOURCE)]
        return ListResourcesResult(resources=resources).to_wire()

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        call = CallToolParams.model_validate(params)
        entry = self.registry.lookup(EntryKind.TOOL, call.name)

        arguments = entry.schema.coerce(call.arguments or {})
        missing = entry.schema.missing(arguments)
        if missing:
            raise InvalidParamsError(
                f"Missing required arguments for tool '{entry.name}': {', '.join(missing)}",
                data={"missing": missing},
            )

        try:
            result = results.tool_result(
                await self._invoke(EntryKind.TOOL, entry.name, entry.handler, entry.schema.bind(arguments))
            )
        except Exception as e:
            logger.info(f"Tool {entry.name} reported an error: {e}")
            result = results.tool_error(e)
        return result.to_wire()

    async def _handle_prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        get = GetPromptParams.model_validate(params)
        entry = self.registry.lookup(EntryKind.PROMPT, get.name)

        arguments = entry.schema.coerce(get.arguments or {})
        missing = entry.schema.missing(arguments)
        if missing:
            raise InvalidParamsError(
                f"Missing required arguments for prompt '{entry.name}': {', '.join(missing)}",
                data={"missing": missing},
            )

        result = await self._invoke_protocol(EntryKind.PROMPT, entry.name, entry.handler, entry.schema.bind(arguments))
        return results.prompt_result(entry, result).to_wire()

    async def _handle_resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        read = ReadResourceParams.model_validate(params)
        entry = self.registry.lookup(EntryKind.RESOURCE, read.uri)

        result = await self._invoke_protocol(EntryKind.RESOURCE, entry.uri, entry.handler, {})
        return results.resource_result(entry, result).to_wire()
