"""
MCP Server Core

Registry, dispatch and session handling for MCP servers.
"""

from .dispatcher import Dispatcher
from .registry import Registry
from .server import McpServer, build_schema
from .session_runner import SessionRunner

__all__ = [
    "Dispatcher",
    "McpServer",
    "Registry",
    "SessionRunner",
    "build_schema",
]
