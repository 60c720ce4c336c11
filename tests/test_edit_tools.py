"""
Page Edit Tool Tests

The MediaWiki client is replaced by an AsyncMock so the token/write sequence
and response interpretation can be checked in isolation.
"""

from unittest.mock import AsyncMock

import pytest

from mw_edit_mcp.tools.edit_tools import (
    EditFailure,
    EditSuccess,
    format_edit_comment,
    get_page_url,
    tool_create_page,
    tool_update_page,
)
from mw_edit_mcp.wiki.api_client import MediaWikiAuthError, MediaWikiClient, TokenAcquisitionError
from mw_edit_mcp.wiki.registry import WikiProfile, WikiRegistry


SUCCESS_RESPONSE = {
    "edit": {"result": "Success", "pageid": 1, "title": "T", "oldrevid": 6, "newrevid": 7}
}


@pytest.fixture
def registry():
    profile = WikiProfile(
        site_name="Wikipedia",
        server="https://en.wikipedia.org",
        article_path="/wiki",
        script_path="/w",
    )
    return WikiRegistry({"en.wikipedia.org": profile}, default_key="en.wikipedia.org")


@pytest.fixture
def mock_client(registry):
    client = AsyncMock(spec=MediaWikiClient)
    client.registry = registry
    client.fetch_write_token.return_value = "csrf-token"
    client.perform_write.return_value = SUCCESS_RESPONSE
    return client


async def run_create(client):
    return await tool_create_page(client, source="Hello", title="T")


async def run_update(client):
    return await tool_update_page(client, title="T", source="Hello", latest_id=6)


def test_format_edit_comment():
    assert format_edit_comment("create-page") == (
        "Automated edit (via create-page on MediaWiki MCP Server)"
    )
    assert format_edit_comment("update-page", "Fix typo") == (
        "Fix typo (via update-page on MediaWiki MCP Server)"
    )


def test_page_url_is_encoded(registry):
    profile = registry.get_current_profile()
    assert get_page_url(profile, "T") == "https://en.wikipedia.org/wiki/T"
    assert get_page_url(profile, "A/B c") == "https://en.wikipedia.org/wiki/A%2FB%20c"


@pytest.mark.asyncio
async def test_create_page_success(mock_client):
    outcome = await tool_create_page(
        mock_client, source="Hello", title="T", comment="New", content_model="json"
    )

    assert isinstance(outcome, EditSuccess)
    assert outcome.page_url == "https://en.wikipedia.org/wiki/T"
    assert outcome.page.newrevid == 7

    params = mock_client.perform_write.await_args.args[0]
    assert params == {
        "action": "edit",
        "title": "T",
        "text": "Hello",
        "summary": "New (via create-page on MediaWiki MCP Server)",
        "format": "json",
        "contentmodel": "json",
        "token": "csrf-token",
    }


@pytest.mark.asyncio
async def test_create_page_omits_content_model(mock_client):
    await run_create(mock_client)
    params = mock_client.perform_write.await_args.args[0]
    assert "contentmodel" not in params
    assert "baserevid" not in params


@pytest.mark.asyncio
async def test_update_page_sends_base_revision(mock_client):
    outcome = await run_update(mock_client)

    assert isinstance(outcome, EditSuccess)
    params = mock_client.perform_write.await_args.args[0]
    assert params["baserevid"] == "6"
    assert params["summary"] == "Automated edit (via update-page on MediaWiki MCP Server)"
    assert "contentmodel" not in params


@pytest.mark.asyncio
async def test_token_and_write_use_same_profile(mock_client, registry):
    await run_create(mock_client)

    profile = registry.get_current_profile()
    assert mock_client.fetch_write_token.await_args.args == (profile,)
    assert mock_client.perform_write.await_args.args[1] is profile


@pytest.mark.asyncio
@pytest.mark.parametrize("run, verb", [(run_create, "create"), (run_update, "update")])
async def test_non_success_result_fails(mock_client, run, verb):
    mock_client.perform_write.return_value = {"edit": {"result": "Failure"}}

    outcome = await run(mock_client)

    assert isinstance(outcome, EditFailure)
    assert outcome.message == f"Failed to {verb} page: Failure"


@pytest.mark.asyncio
@pytest.mark.parametrize("run", [run_create, run_update])
@pytest.mark.parametrize("response", [{}, {"warnings": {}}, {"edit": {}}])
async def test_missing_edit_data_fails(mock_client, run, response):
    mock_client.perform_write.return_value = response

    outcome = await run(mock_client)

    assert isinstance(outcome, EditFailure)
    assert "No data returned" in outcome.message


@pytest.mark.asyncio
@pytest.mark.parametrize("run", [run_create, run_update])
async def test_token_failure_skips_write(mock_client, run):
    mock_client.fetch_write_token.side_effect = TokenAcquisitionError("wiki unreachable")

    outcome = await run(mock_client)

    assert isinstance(outcome, EditFailure)
    assert "wiki unreachable" in outcome.message
    mock_client.perform_write.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_token_skips_write(mock_client):
    mock_client.fetch_write_token.return_value = ""

    outcome = await run_create(mock_client)

    assert isinstance(outcome, EditFailure)
    assert outcome.message == "Failed to create page: Could not obtain CSRF token"
    mock_client.perform_write.assert_not_awaited()


@pytest.mark.asyncio
async def test_write_error_is_reported(mock_client):
    mock_client.perform_write.side_effect = MediaWikiAuthError("permissiondenied", "Not allowed")

    outcome = await run_update(mock_client)

    assert isinstance(outcome, EditFailure)
    assert outcome.message == "Failed to update page: permissiondenied: Not allowed"


@pytest.mark.asyncio
async def test_malformed_edit_object_is_reported(mock_client):
    mock_client.perform_write.return_value = {
        "edit": {"result": "Success", "pageid": "not-a-number", "title": "T"}
    }

    outcome = await run_create(mock_client)

    assert isinstance(outcome, EditFailure)
    assert outcome.message.startswith("Failed to create page:")


@pytest.mark.asyncio
async def test_success_without_pageid_is_a_success(mock_client):
    mock_client.perform_write.return_value = {"edit": {"result": "Success", "newrevid": 9}}

    outcome = await run_create(mock_client)

    assert isinstance(outcome, EditSuccess)
    assert outcome.page.pageid is None
    assert outcome.page.title == "T"
    assert outcome.page.newrevid == 9
    assert outcome.page_url == "https://en.wikipedia.org/wiki/T"
