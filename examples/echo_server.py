#!/usr/bin/env python3
"""Minimal MCP server exposing a single `echo` tool.

Run with `python examples/echo_server.py` or `mcpkit run examples/echo_server.py`.
"""

from mcpkit import McpServer


def echo(text: str) -> str:
    """Return the text unchanged."""
    return text


server = McpServer("echo-server").tool("echo", "Echoes text", echo)


if __name__ == "__main__":
    server.run()
