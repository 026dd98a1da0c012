"""Version information for mcpkit."""

__version__ = "0.3.0"
