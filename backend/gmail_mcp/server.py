"""MCP server wiring: exposes the tool catalogue and dispatcher over stdio."""

import logging
from typing import Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from gmail_mcp import SERVER_NAME, __version__
from gmail_mcp.config import Settings
from gmail_mcp.tools.email import MailSender, MailTools
from gmail_mcp.tools.registry import ToolDispatcher, list_operations

logger = logging.getLogger(__name__)


def create_server(settings: Settings, sender: Optional[MailSender] = None) -> Server:
    """Build the MCP server around a MailTools instance."""
    server = Server(SERVER_NAME, version=__version__)
    dispatcher = ToolDispatcher(MailTools(settings, sender=sender))

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_operations()

    # call_tool() would turn McpError into an isError result; it must reach the client as a JSON-RPC error.
    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        content = await dispatcher.dispatch(req.params.name, req.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s %s running on stdio", SERVER_NAME, __version__)
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
