"""
MCP stdio Server Entry Point

Runs the wiki edit tools over the Model Context Protocol on stdin/stdout.

stdout carries the protocol, so all logging goes to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .config import settings
from .tools.base import ToolContext, dispatch_tool_call
from .tools.definitions import TOOL_DEFINITIONS
from .wiki.api_client import MediaWikiClient
from .wiki.registry import WikiRegistryError, build_registry

logger = logging.getLogger("mcp.server")

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str) -> None:
    """Send all log records to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)


def create_server(ctx: ToolContext, name: Optional[str] = None) -> Server:
    """
    Build an MCP server whose tools dispatch through `ctx`.
    """
    app = Server(name or settings.server_name)

    @app.list_tools()
    async def list_tools() -> List[types.Tool]:
        return TOOL_DEFINITIONS

    @app.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        logger.info("Tool call: %s", name)
        return await dispatch_tool_call(name, arguments, ctx)

    return app


async def serve(ctx: ToolContext) -> None:
    app = create_server(ctx)
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mw-edit-mcp",
        description="MCP server exposing MediaWiki page create/update tools.",
    )
    parser.add_argument(
        "--config",
        default=settings.config_path,
        help="Path to the wiki config JSON (default: $MW_EDIT_CONFIG, $CONFIG or ./config.json)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )
    return parser.parse_args(argv)


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        registry = build_registry(args.config)
    except WikiRegistryError as exc:
        logger.error("MCP server failed to start: %s", exc)
        return 1

    profile = registry.get_current_profile()
    logger.info("Starting %s on %s (%s)", settings.server_name, profile.site_name, profile.server)

    ctx = ToolContext(registry=registry, client=MediaWikiClient(registry))
    try:
        asyncio.run(serve(ctx))
    finally:
        logger.info("MCP server stopped")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
