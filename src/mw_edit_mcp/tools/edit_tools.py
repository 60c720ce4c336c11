"""
Page Edit Tools

Create and update wiki pages through the MediaWiki `action=edit` API.

Both operations follow the same sequence: snapshot the current wiki profile,
fetch a CSRF token, perform exactly one write, then interpret the `edit`
object in the response. Every failure along the way is returned as an
`EditFailure`; nothing is raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from ..wiki.api_client import MediaWikiClient
from ..wiki.registry import WikiProfile

logger = logging.getLogger("mcp.tools")

SERVER_LABEL = "MediaWiki MCP Server"


# ---------------------------------------------------------------------
# Outcome Models
# ---------------------------------------------------------------------

class PageEditResult(BaseModel):
    """The `edit` object returned by a successful `action=edit` call."""

    result: str
    pageid: Optional[int] = None
    title: str
    oldrevid: Optional[int] = None
    newrevid: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class EditSuccess(BaseModel):
    page: PageEditResult
    page_url: str


class EditFailure(BaseModel):
    message: str


EditOutcome = Union[EditSuccess, EditFailure]


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def format_edit_comment(tool: str, comment: Optional[str] = None) -> str:
    """Build the edit summary, tagging which tool made the edit."""
    suffix = f"(via {tool} on {SERVER_LABEL})"
    if not comment:
        return f"Automated edit {suffix}"
    return f"{comment} {suffix}"


def get_page_url(profile: WikiProfile, title: str) -> str:
    return f"{profile.server}{profile.article_path}/{quote(title, safe='')}"


async def _apply_edit(
    client: MediaWikiClient,
    verb: str,
    params: Dict[str, Any],
) -> EditOutcome:
    profile = client.registry.get_current_profile()

    try:
        token = await client.fetch_write_token(profile)
        if not token:
            return EditFailure(message=f"Failed to {verb} page: Could not obtain CSRF token")

        data = await client.perform_write({**params, "token": token}, profile)

        edit = data.get("edit") if data else None
        if not edit:
            return EditFailure(message=f"Failed to {verb} page: No data returned from API")

        if edit.get("result") != "Success":
            return EditFailure(message=f"Failed to {verb} page: {edit.get('result')}")

        # A committed edit may omit pageid or title; fall back to the requested title
        page = PageEditResult.model_validate({"title": params.get("title"), **edit})
    except Exception as exc:
        logger.warning(
            "Failed to %s page %r on %s: %s",
            verb,
            params.get("title"),
            profile.server,
            type(exc).__name__,
        )
        return EditFailure(message=f"Failed to {verb} page: {exc}")

    logger.info("Page %r %sd on %s (rev %s)", page.title, verb, profile.server, page.newrevid)
    return EditSuccess(page=page, page_url=get_page_url(profile, page.title))


# ---------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------

async def tool_create_page(
    client: MediaWikiClient,
    source: str,
    title: str,
    comment: Optional[str] = None,
    content_model: Optional[str] = None,
) -> EditOutcome:
    """
    Create a wiki page with the provided content.

    Parameters
    ----------
    source : str
        Page content in the format given by `content_model`.

    title : str
        Wiki page title.

    comment : Optional[str]
        Reason for creating the page.

    content_model : Optional[str]
        Content model of the new page; MediaWiki defaults to wikitext.
    """
    params: Dict[str, Any] = {
        "action": "edit",
        "title": title,
        "text": source,
        "summary": format_edit_comment("create-page", comment),
        "format": "json",
    }
    if content_model:
        params["contentmodel"] = content_model

    return await _apply_edit(client, "create", params)


async def tool_update_page(
    client: MediaWikiClient,
    title: str,
    source: str,
    latest_id: int,
    comment: Optional[str] = None,
) -> EditOutcome:
    """
    Replace the content of an existing page.

    `latest_id` is the revision the new source is based on; MediaWiki uses it
    to detect edit conflicts.
    """
    params: Dict[str, Any] = {
        "action": "edit",
        "title": title,
        "text": source,
        "summary": format_edit_comment("update-page", comment),
        "format": "json",
        "baserevid": str(latest_id),
    }

    return await _apply_edit(client, "update", params)
