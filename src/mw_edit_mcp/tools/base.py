"""
Tool Dispatch Layer

This module defines the central, authoritative dispatch mechanism for all
tool calls, from both the MCP stdio server and the HTTP surface. It enforces:

- Explicit tool allow-listing
- Strong argument validation
- Dependency injection for testability
- Uniform error behavior: every failure becomes an error-flagged result

This is the boundary between the host runtime and the wiki. Nothing raised
below it may escape to the host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import mcp.types as types
from pydantic import ValidationError

from ..api.models import CreatePageArgs, ListWikisArgs, SetWikiArgs, UpdatePageArgs
from ..wiki.api_client import MediaWikiClient
from ..wiki.registry import WikiRegistry
from .definitions import TOOL_CREATE_PAGE, TOOL_LIST_WIKIS, TOOL_SET_WIKI, TOOL_UPDATE_PAGE
from .edit_tools import EditFailure, EditOutcome, tool_create_page, tool_update_page
from .wiki_tools import tool_list_wikis, tool_set_wiki

logger = logging.getLogger("mcp.tools")


# ---------------------------------------------------------------------
# Tool Type Definitions
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class ToolContext:
    """Dependencies shared by all tool handlers."""

    registry: WikiRegistry
    client: MediaWikiClient


ToolHandler = Callable[[Dict[str, Any], ToolContext], Awaitable[types.CallToolResult]]


# ---------------------------------------------------------------------
# Result Helpers
# ---------------------------------------------------------------------

def text_result(*texts: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text) for text in texts],
        isError=is_error,
    )


def error_result(message: str) -> types.CallToolResult:
    return text_result(message, is_error=True)


def edit_outcome_result(outcome: EditOutcome, verb: str) -> types.CallToolResult:
    """
    Render an edit outcome as a tool result.

    Success yields two blocks: a confirmation line with the page URL and a
    summary of the page object.
    """
    if isinstance(outcome, EditFailure):
        return error_result(outcome.message)

    page = outcome.page
    summary: List[str] = [
        "Page object:",
        f"Page ID: {page.pageid}",
        f"Title: {page.title}",
        f"Latest revision ID: {page.newrevid}",
        f"Result: {page.result}",
    ]
    return text_result(
        f"Page {verb} successfully: {outcome.page_url}",
        "\n".join(summary),
    )


# ---------------------------------------------------------------------
# Tool Registry (AUTHORITATIVE)
# ---------------------------------------------------------------------

async def _handle_create_page(args: Dict[str, Any], ctx: ToolContext) -> types.CallToolResult:
    parsed = CreatePageArgs.model_validate(args)
    outcome = await tool_create_page(
        ctx.client,
        source=parsed.source,
        title=parsed.title,
        comment=parsed.comment,
        content_model=parsed.content_model,
    )
    return edit_outcome_result(outcome, "created")


async def _handle_update_page(args: Dict[str, Any], ctx: ToolContext) -> types.CallToolResult:
    parsed = UpdatePageArgs.model_validate(args)
    outcome = await tool_update_page(
        ctx.client,
        title=parsed.title,
        source=parsed.source,
        latest_id=parsed.latest_id,
        comment=parsed.comment,
    )
    return edit_outcome_result(outcome, "updated")


async def _handle_set_wiki(args: Dict[str, Any], ctx: ToolContext) -> types.CallToolResult:
    parsed = SetWikiArgs.model_validate(args)
    return text_result(await tool_set_wiki(ctx.client, parsed.wiki_url))


async def _handle_list_wikis(args: Dict[str, Any], ctx: ToolContext) -> types.CallToolResult:
    ListWikisArgs.model_validate(args)
    return text_result(tool_list_wikis(ctx.registry))


TOOL_REGISTRY: Dict[str, ToolHandler] = {
    TOOL_CREATE_PAGE: _handle_create_page,
    TOOL_UPDATE_PAGE: _handle_update_page,
    TOOL_SET_WIKI: _handle_set_wiki,
    TOOL_LIST_WIKIS: _handle_list_wikis,
}


# ---------------------------------------------------------------------
# Public Dispatch API
# ---------------------------------------------------------------------

async def dispatch_tool_call(
    tool_name: str,
    args: Optional[Dict[str, Any]],
    ctx: ToolContext,
) -> types.CallToolResult:
    """
    Dispatch a tool call requested by the host.

    Parameters
    ----------
    tool_name : str
        The tool name from TOOL_DEFINITIONS.

    args : Optional[Dict[str, Any]]
        Parsed JSON arguments for the tool.

    ctx : ToolContext
        Registry and MediaWiki client (injected).

    Returns
    -------
    types.CallToolResult
        Tool result. Unknown tools, invalid arguments and unexpected faults
        produce a result with `isError=True`; this function never raises.
    """
    handler = TOOL_REGISTRY.get(tool_name)
    if not handler:
        return error_result(f"Unknown tool requested: {tool_name}")

    try:
        return await handler(args or {}, ctx)
    except ValidationError as exc:
        return error_result(f"Invalid arguments for {tool_name}: {exc}")
    except Exception as exc:
        logger.exception("Tool %s failed", tool_name)
        return error_result(f"{tool_name} failed: {exc}")
