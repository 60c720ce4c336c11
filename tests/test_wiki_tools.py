"""
Wiki Selection Tool Tests
"""

from unittest.mock import AsyncMock

import pytest

from mw_edit_mcp.tools.wiki_tools import tool_list_wikis, tool_set_wiki
from mw_edit_mcp.wiki.api_client import MediaWikiClient, MediaWikiRequestError
from mw_edit_mcp.wiki.registry import WikiProfile, WikiRegistry


@pytest.fixture
def registry():
    return WikiRegistry(
        {
            "en.wikipedia.org": WikiProfile(
                site_name="Wikipedia",
                server="https://en.wikipedia.org",
                article_path="/wiki",
                script_path="/w",
                token="do-not-print",
            ),
            "localhost:8080": WikiProfile(
                site_name="Local MediaWiki Docker",
                server="http://localhost:8080",
                article_path="/wiki",
                script_path="/w",
            ),
        },
        default_key="en.wikipedia.org",
    )


@pytest.fixture
def mock_client(registry):
    client = AsyncMock(spec=MediaWikiClient)
    client.registry = registry
    return client


def test_list_wikis_marks_current(registry):
    text = tool_list_wikis(registry)

    lines = text.splitlines()
    assert lines[0] == "en.wikipedia.org: Wikipedia <https://en.wikipedia.org> (current)"
    assert lines[1] == "localhost:8080: Local MediaWiki Docker <http://localhost:8080>"
    assert "do-not-print" not in text


def test_list_wikis_marks_only_current_key_among_identical_profiles():
    profile = WikiProfile(server="https://mirror.wiki", article_path="/wiki", script_path="/w")
    registry = WikiRegistry({"a.wiki": profile, "b.wiki": profile}, default_key="a.wiki")
    registry.set_current("b.wiki")

    lines = tool_list_wikis(registry).splitlines()

    assert lines == [
        "a.wiki: a.wiki <https://mirror.wiki>",
        "b.wiki: b.wiki <https://mirror.wiki> (current)",
    ]


def test_list_wikis_still_marks_current_after_its_profile_is_replaced(registry):
    registry.update_profile(
        "en.wikipedia.org",
        WikiProfile(
            site_name="Wikipedia",
            server="https://en.wikipedia.org",
            article_path="/wiki",
            script_path="/w",
            private=True,
        ),
    )

    lines = tool_list_wikis(registry).splitlines()

    assert sum(line.endswith(" (current)") for line in lines) == 1
    assert lines[0].endswith(" (current)")


@pytest.mark.asyncio
async def test_set_wiki_known_key(mock_client, registry):
    text = await tool_set_wiki(mock_client, "http://localhost:8080/wiki/Main_Page")

    assert registry.wiki_server() == "http://localhost:8080"
    assert "Local MediaWiki Docker" in text
    mock_client.fetch_site_info.assert_not_awaited()


@pytest.mark.asyncio
async def test_set_wiki_without_scheme(mock_client, registry):
    registry.set_current("localhost:8080")
    await tool_set_wiki(mock_client, "en.wikipedia.org")
    assert registry.wiki_server() == "https://en.wikipedia.org"


@pytest.mark.asyncio
async def test_set_wiki_discovers_unknown_wiki(mock_client, registry):
    mock_client.fetch_site_info.return_value = {
        "sitename": "Wiktionary",
        "server": "//en.wiktionary.org",
        "articlepath": "/wiki/$1",
        "scriptpath": "/w",
    }

    text = await tool_set_wiki(mock_client, "https://en.wiktionary.org/wiki/word")

    mock_client.fetch_site_info.assert_awaited_once_with("https://en.wiktionary.org/w/api.php")
    assert "en.wiktionary.org" in registry.list_profiles()
    assert registry.wiki_server() == "https://en.wiktionary.org"
    assert registry.article_path() == "/wiki"
    assert registry.site_name() == "Wiktionary"
    assert text == "Wiki set to Wiktionary (https://en.wiktionary.org)"


@pytest.mark.asyncio
async def test_set_wiki_tries_next_script_path(mock_client, registry):
    mock_client.fetch_site_info.side_effect = [
        MediaWikiRequestError("404"),
        {
            "sitename": "Intranet",
            "server": "https://intra.wiki",
            "articlepath": "/mediawiki/index.php/$1",
            "scriptpath": "/mediawiki",
        },
    ]

    await tool_set_wiki(mock_client, "https://intra.wiki")

    assert mock_client.fetch_site_info.await_args.args == ("https://intra.wiki/mediawiki/api.php",)
    assert registry.article_path() == "/mediawiki/index.php"
    assert registry.script_path() == "/mediawiki"


@pytest.mark.asyncio
async def test_set_wiki_rejects_empty_script_path(mock_client, registry):
    mock_client.fetch_site_info.return_value = {
        "sitename": "Root", "server": "https://root.wiki", "articlepath": "/$1", "scriptpath": "",
    }

    with pytest.raises(ValueError):
        await tool_set_wiki(mock_client, "https://root.wiki")

    assert registry.wiki_server() == "https://en.wikipedia.org"


@pytest.mark.asyncio
async def test_set_wiki_unreachable_keeps_current(mock_client, registry):
    mock_client.fetch_site_info.side_effect = MediaWikiRequestError("down")
    before = registry.get_current_profile()

    with pytest.raises(ValueError):
        await tool_set_wiki(mock_client, "https://nowhere.example")

    assert registry.get_current_profile() is before
    assert "nowhere.example" not in registry.list_profiles()
