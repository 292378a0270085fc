"""
OpenTelemetry integration: one span per tool call.

Spans are exported to stderr when enabled; stdout carries the MCP stream.
"""

import logging
import sys
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

logger = logging.getLogger(__name__)

TRACER_NAME = "gmail_mcp.tools"
TOOL_ATTRIBUTE = "gmail_mcp.tool"

_tracer: Optional[trace.Tracer] = None


def init_telemetry(enabled: bool, service_name: str = "gmail-mcp-server") -> trace.Tracer:
    """Initialize OTel. Call once at startup."""
    global _tracer
    if enabled:
        provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
        trace.set_tracer_provider(provider)
        logger.info("OpenTelemetry initialized (console exporter on stderr)")
    _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def get_tracer() -> trace.Tracer:
    if _tracer is None:
        return trace.get_tracer(TRACER_NAME)
    return _tracer
