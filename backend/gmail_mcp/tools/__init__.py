"""MCP tools exposed by the server."""

from gmail_mcp.tools.email import MailTools
from gmail_mcp.tools.registry import ToolDispatcher, list_operations

__all__ = ["MailTools", "ToolDispatcher", "list_operations"]
