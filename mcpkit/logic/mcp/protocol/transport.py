"""
MCP Stream Transport Layer

Line-oriented duplex byte stream over asyncio streams, with stdio wiring for
the common case of a server launched as a subprocess by its client.
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol

from mcpkit.lib.exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_LINE_LIMIT = 4 * 1024 * 1024


class ByteWriter(Protocol):
    """The subset of asyncio.StreamWriter the transport relies on."""

    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def close(self) -> None: ...


class StreamTransport:
    """
    Duplex line transport.

    Reads are performed by a single reader loop; writes may come from
    concurrent tasks and are serialized so JSON lines never interleave.
    """

    def __init__(self, reader: asyncio.StreamReader, writer: ByteWriter):
        """
        Initialize stream transport.

        Args:
            reader: Source of inbound bytes
            writer: Sink for outbound bytes
        """
        self.reader = reader
        self.writer = writer
        self._write_lock = asyncio.Lock()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def read_line(self) -> Optional[bytes]:
        """
        Read one line.

        Returns:
            The line including its terminator, or None at EOF

        Raises:
            TransportError: If the stream fails or a line exceeds the reader limit
        """
        try:
            line = await self.reader.readline()
        except (asyncio.LimitOverrunError, ValueError) as e:
            raise TransportError(f"Inbound line exceeds limit: {e}") from e
        except (ConnectionError, OSError) as e:
            raise TransportError(f"Read failed: {e}") from e
        if not line:
            return None
        return line

    async def write(self, data: bytes) -> None:
        """
        Write one encoded message.

        Raises:
            TransportError: If the transport is closed or the write fails
        """
        async with self._write_lock:
            if self._closed:
                raise TransportError("Transport is closed")
            try:
                self.writer.write(data)
                await self.writer.drain()
            except (ConnectionError, OSError) as e:
                raise TransportError(f"Write failed: {e}") from e

    async def close(self) -> None:
        """Close the write side. Safe to call more than once."""
        async with self._write_lock:
            if self._closed:
                return
            self._closed = True
            try:
                self.writer.close()
            except (ConnectionError, OSError) as e:
                logger.debug(f"Ignoring error while closing writer: {e}")


@asynccontextmanager
async def open_stdio_transport(limit: int = DEFAULT_LINE_LIMIT) -> AsyncIterator[StreamTransport]:
    """Wire stdin/stdout into a StreamTransport for the current event loop."""
    loop = asyncio.get_running_loop()

    reader = asyncio.StreamReader(limit=limit)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)

    write_transport, write_protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout
    )
    writer = asyncio.StreamWriter(write_transport, write_protocol, reader, loop)

    transport = StreamTransport(reader, writer)
    try:
        yield transport
    finally:
        await transport.close()
