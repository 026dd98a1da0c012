"""Shared library code for mcpkit."""
