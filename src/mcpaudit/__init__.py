"""mcpaudit — heuristic security review of MCP server capability metadata."""

__version__ = "0.3.0"
