"""Process entry point: logging, settings, telemetry, stdio server loop."""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from gmail_mcp.config import Settings
from gmail_mcp.server import create_server, run_stdio
from gmail_mcp.services.telemetry import init_telemetry

logger = logging.getLogger("gmail_mcp")


def configure_logging(level: str) -> None:
    # stdout carries the MCP stream
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("mcp").setLevel(logging.WARNING)


def load_settings(env_file: Optional[str] = None) -> Settings:
    if env_file:
        return Settings(_env_file=env_file)
    return Settings()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Gmail MCP server (stdio)")
    parser.add_argument("--env-file", help="Path to a .env file (default: ./.env)")
    args = parser.parse_args(argv)

    settings = load_settings(args.env_file)
    configure_logging(settings.log_level)
    init_telemetry(settings.telemetry_enabled)

    if not settings.is_configured:
        logger.warning(
            "Gmail credentials incomplete (missing %s); send tools will fail until configured",
            ", ".join(settings.missing_credentials),
        )

    asyncio.run(run_stdio(create_server(settings)))


if __name__ == "__main__":
    main()
