"""Test configuration and fixtures for mcpkit tests."""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional

import pytest
from click.testing import CliRunner

from mcpkit.core.config import McpKitConfig
from mcpkit.logic.mcp.core.server import McpServer

PROTOCOL_VERSION = "2025-06-18"

INITIALIZE_PARAMS = {
    "protocolVersion": PROTOCOL_VERSION,
    "capabilities": {},
    "clientInfo": {"name": "test-client", "version": "1.0.0"},
}


class CapturingWriter:
    """In-memory stand-in for asyncio.StreamWriter."""

    def __init__(self, fail_after: Optional[int] = None):
        self.chunks: List[bytes] = []
        self.closed = False
        self.fail_after = fail_after

    def write(self, data: bytes) -> None:
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise BrokenPipeError("client went away")
        self.chunks.append(data)

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def close(self) -> None:
        self.closed = True

    @property
    def raw(self) -> bytes:
        return b"".join(self.chunks)

    @property
    def messages(self) -> List[Dict[str, Any]]:
        return [json.loads(line) for line in self.raw.splitlines() if line.strip()]


def request(request_id: Any, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a JSON-RPC request dict."""
    message: Dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def initialize_request(request_id: Any = 0, version: str = PROTOCOL_VERSION) -> Dict[str, Any]:
    return request(request_id, "initialize", dict(INITIALIZE_PARAMS, protocolVersion=version))


def to_lines(*messages: Any) -> bytes:
    """Encode dicts as JSON lines; bytes and str pass through as raw lines."""
    lines = []
    for message in messages:
        if isinstance(message, bytes):
            lines.append(message)
        elif isinstance(message, str):
            lines.append(message.encode("utf-8"))
        else:
            lines.append(json.dumps(message).encode("utf-8"))
    return b"".join(line if line.endswith(b"\n") else line + b"\n" for line in lines)


@pytest.fixture
def test_config() -> McpKitConfig:
    """Create a test configuration independent of the environment."""
    return McpKitConfig(
        server_name="test-server",
        server_version="1.0.0",
        handler_timeout=None,
        max_concurrency=1,
        log_level="WARNING",
    )


@pytest.fixture
def echo_server(test_config: McpKitConfig) -> McpServer:
    """Server with a single echo tool."""
    def echo(text: str) -> str:
        return text

    return McpServer(config=test_config).tool("echo", "Echoes text", echo)


@pytest.fixture
def run_session() -> Callable:
    """Run a full session over in-memory streams and return the parsed output."""
    async def _run(server: McpServer, *messages: Any, writer: Optional[CapturingWriter] = None):
        reader = asyncio.StreamReader(limit=server.config.max_line_bytes)
        reader.feed_data(to_lines(*messages))
        reader.feed_eof()
        writer = writer or CapturingWriter()
        runner = await asyncio.wait_for(server.serve(reader, writer), timeout=10)
        return writer.messages, runner

    return _run


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create CLI runner for testing Click commands."""
    return CliRunner()
