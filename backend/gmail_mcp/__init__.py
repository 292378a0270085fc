"""Gmail MCP server: send email and check Gmail configuration over MCP."""

SERVER_NAME = "gmail-mcp-server"
__version__ = "1.0.0"
