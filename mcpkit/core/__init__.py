"""Core configuration and logging for mcpkit."""

from .config import McpKitConfig
from .lib_logger import get_component_logger, get_logger, setup_logging

__all__ = ["McpKitConfig", "get_logger", "get_component_logger", "setup_logging"]
