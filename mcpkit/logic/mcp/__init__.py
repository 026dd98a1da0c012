"""
MCP Logic Layer

Request dispatch, capability negotiation and handler registry for
Model Context Protocol servers.
"""
