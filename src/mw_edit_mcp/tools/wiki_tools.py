"""
Wiki Selection Tools

Tools that inspect or change which configured wiki the edit tools write to.

Responsibilities
----------------
- List configured wikis without exposing credentials.
- Switch the current wiki by URL, discovering unknown wikis via siteinfo.
"""

from __future__ import annotations

import logging
from typing import List
from urllib.parse import urlsplit

from ..wiki.api_client import MediaWikiClient, MediaWikiClientError
from ..wiki.registry import WikiProfile, WikiRegistry

logger = logging.getLogger("mcp.tools")

# Script paths tried, in order, when discovering an unconfigured wiki.
CANDIDATE_SCRIPT_PATHS = ("/w", "/mediawiki")


def tool_list_wikis(registry: WikiRegistry) -> str:
    """Return one line per configured wiki, marking the current one."""
    current_key = registry.current_key
    lines: List[str] = []

    for key, profile in registry.list_profiles().items():
        marker = " (current)" if key == current_key else ""
        name = profile.site_name or key
        lines.append(f"{key}: {name} <{profile.server}>{marker}")

    return "\n".join(lines)


def _wiki_key(wiki_url: str) -> tuple[str, str]:
    """Split a wiki URL into (key, origin); the key is host[:port]."""
    if "://" not in wiki_url:
        wiki_url = f"https://{wiki_url}"

    parts = urlsplit(wiki_url)
    if not parts.netloc:
        raise ValueError(f"Invalid wiki URL: '{wiki_url}'")

    return parts.netloc, f"{parts.scheme}://{parts.netloc}"


def _profile_from_site_info(general: dict, origin: str) -> WikiProfile:
    script_path = general.get("scriptpath")
    if not script_path:
        raise ValueError(f"Wiki at {origin} reports an empty script path, which is not supported")

    server = general.get("server") or origin
    if server.startswith("//"):
        # Protocol-relative $wgServer
        server = f"{urlsplit(origin).scheme}:{server}"

    article_path = general.get("articlepath", "/wiki/$1")
    if article_path.endswith("/$1"):
        article_path = article_path[: -len("/$1")]

    return WikiProfile(
        site_name=general.get("sitename", ""),
        server=server,
        article_path=article_path or "/wiki",
        script_path=script_path,
    )


async def _discover_profile(client: MediaWikiClient, origin: str) -> WikiProfile:
    last_error: Exception | None = None

    for script_path in CANDIDATE_SCRIPT_PATHS:
        api_url = f"{origin}{script_path}/api.php"
        try:
            general = await client.fetch_site_info(api_url)
        except MediaWikiClientError as exc:
            logger.debug("No MediaWiki API at %s: %s", api_url, exc)
            last_error = exc
            continue
        return _profile_from_site_info(general, origin)

    raise ValueError(f"Could not find a MediaWiki API at {origin}: {last_error}")


async def tool_set_wiki(client: MediaWikiClient, wiki_url: str) -> str:
    """
    Make the wiki at `wiki_url` the current one.

    Configured wikis are switched to directly. Unknown wikis are discovered
    through their siteinfo and added to the registry (not to the config file).

    Raises
    ------
    ValueError
        If the URL is malformed or no MediaWiki API answers at it.
    """
    if not wiki_url:
        raise ValueError("set-wiki requires a non-empty 'wikiUrl' argument.")

    registry = client.registry
    key, origin = _wiki_key(wiki_url)

    if key not in registry.list_profiles():
        profile = await _discover_profile(client, origin)
        registry.update_profile(key, profile)
        logger.info("Discovered wiki %s at %s", key, profile.server)

    profile = registry.set_current(key)
    return f"Wiki set to {profile.site_name or key} ({profile.server})"
