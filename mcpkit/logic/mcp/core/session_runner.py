"""
MCP Session Runner

Owns the read loop of one connection: read a line, decode, dispatch, encode,
write. Requests are handled in arrival order unless concurrency is enabled,
in which case responses are written as they complete, each carrying its
request id.
"""

import asyncio
import logging
from typing import Any, Optional, Union

from mcpkit.lib.exceptions import DecodeError, EncodeError, TransportError
from mcpkit.logic.mcp.models.registry_entry import EntryKind
from mcpkit.logic.mcp.protocol import codec
from mcpkit.logic.mcp.protocol.message import (
    JsonRpcErrorResponse,
    JsonRpcMessage,
    JsonRpcNotification,
    JsonRpcRequest,
)
from mcpkit.logic.mcp.protocol.session import Session, SessionState
from mcpkit.logic.mcp.protocol.transport import StreamTransport

from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)

FatalError = Union[TransportError, EncodeError]


class SessionRunner:
    """Serve one session over a stream transport until EOF or a fatal error."""

    def __init__(self, dispatcher: Dispatcher, transport: StreamTransport, max_concurrency: int = 1):
        """
        Initialize session runner.

        Args:
            dispatcher: Request router for this session
            transport: Duplex line transport
            max_concurrency: Requests handled at once; 1 keeps strict read order
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.dispatcher = dispatcher
        self.transport = transport
        self.max_concurrency = max_concurrency

        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: set[asyncio.Task] = set()
        self._read_task: Optional[asyncio.Task] = None
        self._fatal: Optional[FatalError] = None

    @property
    def session(self) -> Session:
        return self.dispatcher.negotiator.session

    @property
    def fatal_error(self) -> Optional[FatalError]:
        """The error that terminated the session, if any."""
        return self._fatal

    async def run(self) -> None:
        """Run the read loop until the stream closes."""
        logger.info("Session started")
        self._read_task = asyncio.create_task(self._read_loop())
        try:
            await self._read_task
        except asyncio.CancelledError:
            if self._fatal is None:
                raise
        except (TransportError, EncodeError) as e:
            self._fail(e)
        finally:
            await self._shutdown()

    async def _read_loop(self) -> None:
        while True:
            line = await self.transport.read_line()
            if line is None:
                logger.info("Client closed the stream")
                return
            if not line.strip():
                continue
            await self._handle_line(line)

    async def _handle_line(self, line: bytes) -> None:
        try:
            message = codec.decode(line)
        except DecodeError as e:
            logger.warning(f"Rejected inbound message: {e.message}")
            await self._send(JsonRpcErrorResponse.from_error(e.request_id, {"code": e.code, "message": e.message}))
            return

        if isinstance(message, JsonRpcRequest):
            if self.max_concurrency == 1 or message.method == "initialize":
                await self._send(await self.dispatcher.handle_request(message))
            else:
                await self._semaphore.acquire()
                task = asyncio.create_task(self._run_request(message))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
        elif isinstance(message, JsonRpcNotification):
            await self.dispatcher.handle_notification(message)
        else:
            # This server never issues requests, so responses have nothing to correlate with
            logger.debug(f"Ignoring {type(message).__name__} from client (id={message.id!r})")

    async def _run_request(self, request: JsonRpcRequest) -> None:
        try:
            response = await self.dispatcher.handle_request(request)
            await self._send(response)
        except (TransportError, EncodeError) as e:
            self._fail(e)
        finally:
            self._semaphore.release()

    async def _send(self, message: JsonRpcMessage) -> None:
        await self.transport.write(codec.encode(message))

    def _fail(self, error: FatalError) -> None:
        if self._fatal is not None:
            return
        self._fatal = error
        logger.error(f"Session terminated: {error.message}")
        if self._read_task is not None and not self._read_task.done():
            self._read_task.cancel()

    async def _shutdown(self) -> None:
        pending = list(self._tasks)
        if self._fatal is None:
            self.session.state = SessionState.SHUTTING_DOWN
            if pending:
                logger.debug(f"Waiting for {len(pending)} in-flight requests")
                await asyncio.gather(*pending, return_exceptions=True)
        else:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        await self.transport.close()
        self.session.state = SessionState.CLOSED
        logger.info("Session closed")

    async def send_notification(self, method: str, params: Optional[dict[str, Any]] = None) -> bool:
        """
        Send a server-initiated notification.

        Returns:
            True if written, False if the session is not ready
        """
        if not self.session.is_ready:
            logger.debug(f"Not sending {method}: session is {self.session.state}")
            return False
        await self._send(JsonRpcNotification(method=method, params=params))
        return True

    async def notify_list_changed(self, kind: EntryKind) -> bool:
        """
        Emit notifications/<kind>s/list_changed if listChanged was advertised.

        Registration is setup-time-only, so nothing inside the server calls
        this on its own.
        """
        kind = EntryKind(kind)
        capabilities = self.session.server_capabilities
        if capabilities is None or not capabilities.list_changed_enabled(kind.plural):
            return False
        return await self.send_notification(f"notifications/{kind.plural}/list_changed")
