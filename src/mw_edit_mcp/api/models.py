"""
API Models for MCP Server

This module defines the Pydantic models used to validate tool arguments and
HTTP payloads.

Design Goals
------------
- Strong typing
- Argument names identical to the published tool schemas (camelCase)
- Explicit rejection of unknown arguments
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------
# Tool Input Contracts (Authoritative)
# ---------------------------------------------------------------------

class CreatePageArgs(BaseModel):
    """
    Arguments for `create-page`.
    """
    source: str
    title: str = Field(..., min_length=1)
    comment: Optional[str] = None
    content_model: Optional[str] = Field(default=None, alias="contentModel")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class UpdatePageArgs(BaseModel):
    """
    Arguments for `update-page`.
    """
    title: str = Field(..., min_length=1)
    source: str
    latest_id: int = Field(..., alias="latestId")
    comment: Optional[str] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SetWikiArgs(BaseModel):
    """
    Arguments for `set-wiki`.
    """
    wiki_url: str = Field(..., min_length=1, alias="wikiUrl")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ListWikisArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# HTTP Models
# ---------------------------------------------------------------------

class WikiSummary(BaseModel):
    sitename: str
    server: str


class HealthResponse(BaseModel):
    status: str = "ok"
    wiki: WikiSummary


class ToolListResponse(BaseModel):
    tools: List[Dict[str, Any]] = Field(default_factory=list)
