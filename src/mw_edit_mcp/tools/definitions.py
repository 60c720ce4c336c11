"""
MCP Tool Definitions

This module defines the authoritative tool schemas exposed to MCP hosts.
These definitions must remain strictly synchronized with:

- tools/base.py (TOOL_REGISTRY)
- api/models.py (tool input contracts)

Only tools defined here can ever be invoked.
"""

from __future__ import annotations

from typing import Dict, Final, List

import mcp.types as types


# ---------------------------------------------------------------------
# Tool Name Constants (Single Source of Truth)
# ---------------------------------------------------------------------

TOOL_CREATE_PAGE: Final[str] = "create-page"
TOOL_UPDATE_PAGE: Final[str] = "update-page"
TOOL_SET_WIKI: Final[str] = "set-wiki"
TOOL_LIST_WIKIS: Final[str] = "list-wikis"


# ---------------------------------------------------------------------
# Tool Definitions
# ---------------------------------------------------------------------

TOOL_DEFINITIONS: List[types.Tool] = [
    types.Tool(
        name=TOOL_CREATE_PAGE,
        title="Create page",
        description="Creates a wiki page with the provided content.",
        inputSchema={
            "type": "object",
            "properties": {
                "source": {
                    "type": "string",
                    "description": "Page content in the format specified by the contentModel parameter",
                },
                "title": {
                    "type": "string",
                    "description": "Wiki page title",
                    "minLength": 1,
                },
                "comment": {
                    "type": "string",
                    "description": "Reason for creating the page",
                },
                "contentModel": {
                    "type": "string",
                    "description": 'Type of content on the page. Defaults to "wikitext"',
                },
            },
            "required": ["source", "title"],
            "additionalProperties": False,
        },
        annotations=types.ToolAnnotations(
            title="Create page",
            readOnlyHint=False,
            destructiveHint=True,
        ),
    ),
    types.Tool(
        name=TOOL_UPDATE_PAGE,
        title="Update page",
        description=(
            "Updates a wiki page. "
            "Replaces the existing content of a page with the provided content"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Wiki page title",
                    "minLength": 1,
                },
                "source": {
                    "type": "string",
                    "description": "Page content in the same content model of the existing page",
                },
                "latestId": {
                    "type": "integer",
                    "description": "Identifier for the revision used as the base for the new source",
                },
                "comment": {
                    "type": "string",
                    "description": "Summary of the edit",
                },
            },
            "required": ["title", "source", "latestId"],
            "additionalProperties": False,
        },
        annotations=types.ToolAnnotations(
            title="Update page",
            readOnlyHint=False,
            destructiveHint=True,
        ),
    ),
    types.Tool(
        name=TOOL_SET_WIKI,
        title="Set wiki",
        description=(
            "Sets the wiki that subsequent page edits are written to. "
            "Unconfigured wikis are discovered from their site information."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "wikiUrl": {
                    "type": "string",
                    "description": "Any URL on the target wiki, e.g. https://en.wikipedia.org",
                    "minLength": 1,
                },
            },
            "required": ["wikiUrl"],
            "additionalProperties": False,
        },
        annotations=types.ToolAnnotations(
            title="Set wiki",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=True,
        ),
    ),
    types.Tool(
        name=TOOL_LIST_WIKIS,
        title="List wikis",
        description="Lists the configured wikis and marks the current one.",
        inputSchema={
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        },
        annotations=types.ToolAnnotations(
            title="List wikis",
            readOnlyHint=True,
        ),
    ),
]

TOOLS_BY_NAME: Dict[str, types.Tool] = {tool.name: tool for tool in TOOL_DEFINITIONS}
