"""MCP server for wwtt."""
