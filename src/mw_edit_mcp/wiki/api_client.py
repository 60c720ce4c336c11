"""
MediaWiki Action API Client

This module is the only place that talks HTTP to a MediaWiki instance. It
obtains CSRF tokens and performs authenticated write calls against whichever
wiki profile is current in the registry.

Design Goals
------------
- One token fetch and one write per tool invocation (no retries, no caching)
- Typed failures: transport, API-reported, authentication, malformed body
- Profile snapshot passed explicitly so both calls hit the same wiki
- Injectable httpx transport for testing
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from .registry import WikiProfile, WikiRegistry, is_token_valid

logger = logging.getLogger("mcp.wiki")


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

# API error codes that mean the credential was rejected or is required.
AUTH_ERROR_CODES = frozenset({
    "assertuserfailed",
    "assertbotfailed",
    "mwoauth-invalid-authorization",
    "mwoauth-invalid-authorization-invalid-user",
    "mwoauth-invalid-authorization-wrong-user",
    "notloggedin",
    "permissiondenied",
    "readapidenied",
})


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class MediaWikiClientError(RuntimeError):
    """Base exception for MediaWiki client failures."""


class MediaWikiRequestError(MediaWikiClientError):
    """Raised on transport failures and unexpected HTTP status codes."""


class MediaWikiResponseError(MediaWikiClientError):
    """Raised when the response body is not a JSON object."""


class MediaWikiApiError(MediaWikiClientError):
    """Raised when the API reports an `error` object."""

    def __init__(self, code: str, info: str) -> None:
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info


class MediaWikiAuthError(MediaWikiApiError):
    """Raised when the credential is rejected or missing where required."""


class TokenAcquisitionError(MediaWikiClientError):
    """Raised when no CSRF token could be obtained."""


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def get_api_url(profile: WikiProfile) -> str:
    return f"{profile.server}{profile.script_path}/api.php"


def _raise_for_api_error(data: Dict[str, Any]) -> None:
    error = data.get("error")
    if not error:
        return

    if isinstance(error, dict):
        code = str(error.get("code", "unknown"))
        info = str(error.get("info", ""))
    else:
        code, info = "unknown", str(error)

    if code in AUTH_ERROR_CODES:
        raise MediaWikiAuthError(code, info)
    raise MediaWikiApiError(code, info)


# ---------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------

class MediaWikiClient:
    """
    Authenticated request gateway for the current wiki profile.
    """

    def __init__(
        self,
        registry: WikiRegistry,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        registry : WikiRegistry
            Source of the current wiki profile.

        timeout : Optional[float]
            Per-request timeout in seconds; defaults to settings.

        user_agent : Optional[str]
            User-Agent header; defaults to settings.

        transport : Optional[httpx.AsyncBaseTransport]
            Testing override (e.g. httpx.MockTransport).
        """
        self.registry = registry
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._user_agent = user_agent or settings.user_agent
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"User-Agent": self._user_agent},
        )

    async def _request(
        self,
        params: Dict[str, Any],
        profile: Optional[WikiProfile] = None,
        method: str = "GET",
    ) -> Dict[str, Any]:
        """
        Make an authenticated request to the MediaWiki Action API.

        Args:
            params: MediaWiki API parameters
            profile: Wiki to talk to (defaults to the registry's current one)
            method: "GET" for reads, "POST" for writes
        """
        profile = profile or self.registry.get_current_profile()
        url = get_api_url(profile)

        headers = {}
        if is_token_valid(profile.token):
            headers["Authorization"] = f"Bearer {profile.token}"

        try:
            async with self._client() as client:
                if method == "POST":
                    resp = await client.post(url, data=params, headers=headers)
                else:
                    resp = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("MediaWiki request to %s failed: %s", url, type(exc).__name__)
            raise MediaWikiRequestError(
                f"Request to {url} failed: {type(exc).__name__}: {exc}"
            ) from exc

        if resp.status_code in (401, 403):
            raise MediaWikiAuthError(
                f"http-{resp.status_code}",
                f"{profile.server} rejected the request credentials",
            )
        if resp.is_error:
            raise MediaWikiRequestError(
                f"Request to {url} failed with HTTP {resp.status_code}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise MediaWikiResponseError(
                f"Response from {url} is not valid JSON"
            ) from exc

        if not isinstance(data, dict):
            raise MediaWikiResponseError(f"Response from {url} is not a JSON object")

        _raise_for_api_error(data)
        return data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_write_token(self, profile: Optional[WikiProfile] = None) -> str:
        """
        Obtain a CSRF token for the given (or current) wiki.

        Raises
        ------
        TokenAcquisitionError
            If the request fails or the response carries no usable token.
        """
        params = {
            "action": "query",
            "meta": "tokens",
            "type": "csrf",
            "format": "json",
            "formatversion": 2,
        }

        try:
            data = await self._request(params, profile=profile)
        except MediaWikiClientError as exc:
            raise TokenAcquisitionError(f"Could not obtain CSRF token: {exc}") from exc

        token = data.get("query", {}).get("tokens", {}).get("csrftoken")
        if not is_token_valid(token):
            raise TokenAcquisitionError("Could not obtain CSRF token")
        return token

    async def perform_write(
        self,
        params: Dict[str, Any],
        profile: Optional[WikiProfile] = None,
    ) -> Dict[str, Any]:
        """
        Issue one authenticated write (POST) call and return the decoded body.

        `params` must already include the CSRF token.

        Raises
        ------
        MediaWikiRequestError, MediaWikiResponseError,
        MediaWikiApiError, MediaWikiAuthError
        """
        return await self._request(params, profile=profile, method="POST")

    async def fetch_site_info(self, api_url: str) -> Dict[str, Any]:
        """
        Read `meta=siteinfo` general info from an arbitrary api.php URL.

        Unauthenticated; used to discover a wiki that is not configured yet.
        """
        params = {
            "action": "query",
            "meta": "siteinfo",
            "siprop": "general",
            "format": "json",
            "formatversion": 2,
        }

        try:
            async with self._client() as client:
                resp = await client.get(api_url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise MediaWikiRequestError(
                f"Request to {api_url} failed: {type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            raise MediaWikiResponseError(
                f"Response from {api_url} is not valid JSON"
            ) from exc

        if not isinstance(data, dict):
            raise MediaWikiResponseError(f"Response from {api_url} is not a JSON object")

        _raise_for_api_error(data)

        general = data.get("query", {}).get("general")
        if not general:
            raise MediaWikiResponseError(f"No siteinfo returned from {api_url}")
        return general
