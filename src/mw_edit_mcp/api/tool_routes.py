"""
Tool Routes: HTTP Access to MCP Tools

This module exposes the same tools as the MCP stdio server over HTTP, for
hosts that cannot spawn a stdio subprocess.

Current Responsibilities:
- List the authoritative tool definitions
- Invoke a tool with a JSON object of arguments
- Return the MCP `CallToolResult` shape unchanged

Failures inside a tool are reported in the result (`isError: true`) with
HTTP 200; only an unknown tool name yields an HTTP error.
"""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from .dependencies import get_tool_context
from .models import ToolListResponse
from ..tools.base import ToolContext, dispatch_tool_call
from ..tools.definitions import TOOL_DEFINITIONS, TOOLS_BY_NAME

# ---------------------------------------------------------------------
# Router Configuration
# ---------------------------------------------------------------------

router = APIRouter(
    prefix="/tools",
    tags=["tools"],
)

# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@router.get(
    "",
    response_model=ToolListResponse,
    summary="List available tools",
)
async def list_tools() -> ToolListResponse:
    return ToolListResponse(
        tools=[
            tool.model_dump(mode="json", by_alias=True, exclude_none=True)
            for tool in TOOL_DEFINITIONS
        ]
    )


@router.post(
    "/{tool_name}",
    status_code=status.HTTP_200_OK,
    summary="Invoke a tool",
    description=(
        "Invokes one of the listed tools. The body is the tool's argument "
        "object; the response is an MCP CallToolResult."
    ),
)
async def call_tool(
    tool_name: str,
    ctx: Annotated[ToolContext, Depends(get_tool_context)],
    args: Annotated[Optional[Dict[str, Any]], Body()] = None,
) -> Dict[str, Any]:
    """
    Invoke a tool by name.

    Parameters
    ----------
    tool_name : str
        Name from the tool definitions, e.g. `create-page`.

    args : Dict[str, Any]
        Tool arguments, validated by the tool's input model.

    Returns
    -------
    Dict[str, Any]
        The serialized CallToolResult.
    """
    if tool_name not in TOOLS_BY_NAME:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown tool: {tool_name}",
        )

    result = await dispatch_tool_call(tool_name, args, ctx)
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)
