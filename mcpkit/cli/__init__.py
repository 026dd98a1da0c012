"""Command line interface for mcpkit."""
