"""
Tool registry: the fixed MCP tool catalogue and the dispatch boundary.

Handlers return text; any exception they raise is wrapped into a single
internal-error McpError naming the tool.
"""

import logging
from typing import Any, Awaitable, Callable

from mcp import types
from mcp.shared.exceptions import McpError
from opentelemetry.trace import Status, StatusCode

from gmail_mcp.errors import UnknownOperationError
from gmail_mcp.models import EmailRequest, IntroductionRequest
from gmail_mcp.services.telemetry import TOOL_ATTRIBUTE, get_tracer
from gmail_mcp.tools.email import MailTools

logger = logging.getLogger(__name__)

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": "send_email",
        "description": "Send an email using Gmail",
        "inputSchema": {
            "type": "object",
            "properties": {
                "to": {"type": "string", "description": "Recipient email address"},
                "subject": {"type": "string", "description": "Email subject"},
                "body": {"type": "string", "description": "Email body content"},
                "html": {"type": "boolean", "description": "Whether the body is HTML", "default": False},
            },
            "required": ["to", "subject", "body"],
        },
    },
    {
        "name": "send_introduction_email",
        "description": "Send a professional introduction email",
        "inputSchema": {
            "type": "object",
            "properties": {
                "to": {"type": "string", "description": "Recipient email address"},
                "name": {"type": "string", "description": "Your name", "default": "Yasir Aquil"},
                "customMessage": {"type": "string", "description": "Custom message to include"},
            },
            "required": ["to"],
        },
    },
    {
        "name": "check_gmail_config",
        "description": "Check if Gmail configuration is properly set up",
        "inputSchema": {"type": "object", "properties": {}},
    },
]

TOOL_NAMES = frozenset(t["name"] for t in TOOL_DEFINITIONS)


def list_operations() -> list[types.Tool]:
    """The static tool catalogue. Independent of configuration."""
    return [types.Tool(**definition) for definition in TOOL_DEFINITIONS]


def _text(text: str) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=text)]


class ToolDispatcher:
    """Routes a tool call by name to the matching MailTools operation."""

    def __init__(self, tools: MailTools):
        self.tools = tools
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[str]]] = {
            "send_email": self._send_email,
            "send_introduction_email": self._send_introduction_email,
            "check_gmail_config": self._check_gmail_config,
        }

    async def _send_email(self, arguments: dict[str, Any]) -> str:
        result = await self.tools.send_email(EmailRequest.model_validate(arguments))
        return result.text

    async def _send_introduction_email(self, arguments: dict[str, Any]) -> str:
        result = await self.tools.send_introduction_email(IntroductionRequest.model_validate(arguments))
        return result.text

    async def _check_gmail_config(self, arguments: dict[str, Any]) -> str:
        result = await self.tools.check_configuration()
        return result.message

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        handler = self._handlers.get(name)
        if handler is None:
            err = UnknownOperationError(name)
            logger.warning("%s", err)
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(err)))

        with get_tracer().start_as_current_span(
            f"tool.{name}", record_exception=False, set_status_on_exception=False
        ) as span:
            span.set_attribute(TOOL_ATTRIBUTE, name)
            try:
                text = await handler(arguments or {})
            except Exception as e:
                logger.error("Tool %s failed: %s", name, e)
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise McpError(
                    types.ErrorData(code=types.INTERNAL_ERROR, message=f"Error executing {name}: {e}")
                ) from e
        return _text(text)
