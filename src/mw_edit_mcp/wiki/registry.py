"""
Wiki Registry

This module holds the set of MediaWiki instances the server can write to and
tracks which one is "current".

Design choices
--------------
- Explicit `WikiRegistry` object constructed at startup; tests build their own.
- Profiles are immutable pydantic models, so a switch is a single reference
  swap and readers never observe a half-updated profile.
- Mapping and current pointer are guarded by a re-entrant lock.
- Runtime changes are never written back to the config file.

Known quirk
-----------
`update_profile()` on the key that is currently active does not change the
profile returned by `get_current_profile()`. The bound reference is only
re-read from the mapping by a later `set_current()` or `reset_to_default()`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("mcp.registry")


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

DEFAULT_CONFIG_FILENAME = "config.json"


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class WikiRegistryError(RuntimeError):
    """Base exception for wiki registry failures."""


class UnknownWikiError(WikiRegistryError):
    """Raised when switching to a wiki key that is not configured."""


class DefaultWikiMissingError(WikiRegistryError):
    """Raised when the configured default wiki is not in the profile mapping."""


class ConfigLoadError(WikiRegistryError):
    """Raised when the wiki config file cannot be read or validated."""


# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------

class WikiProfile(BaseModel):
    """
    Connection profile for one MediaWiki instance.

    Field aliases match the MediaWiki setting names used in config.json.
    """

    site_name: str = Field(
        default="",
        alias="sitename",
        description="Corresponds to $wgSitename.",
    )

    server: str = Field(
        ...,
        min_length=1,
        description="Corresponds to $wgServer, e.g. https://en.wikipedia.org.",
    )

    article_path: str = Field(
        ...,
        min_length=1,
        alias="articlepath",
        description="Corresponds to $wgArticlePath without the trailing /$1.",
    )

    script_path: str = Field(
        ...,
        min_length=1,
        alias="scriptpath",
        description="Corresponds to $wgScriptPath.",
    )

    token: Optional[str] = Field(
        default=None,
        description="OAuth 2 owner-only access token from Extension:OAuth.",
    )

    private: bool = Field(
        default=False,
        description="True if anonymous read access is disabled on the wiki.",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


class WikiConfigFile(BaseModel):
    """Shape of the JSON wiki configuration document."""

    default_wiki: str = Field(..., min_length=1, alias="defaultWiki")
    wikis: Dict[str, WikiProfile] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


DEFAULT_CONFIG = WikiConfigFile(
    default_wiki="en.wikipedia.org",
    wikis={
        "en.wikipedia.org": WikiProfile(
            site_name="Wikipedia",
            server="https://en.wikipedia.org",
            article_path="/wiki",
            script_path="/w",
        ),
        "localhost:8080": WikiProfile(
            site_name="Local MediaWiki Docker",
            server="http://localhost:8080",
            article_path="/wiki",
            script_path="/w",
        ),
    },
)


def is_token_valid(token: Optional[str]) -> bool:
    """A token is usable only if it is a non-empty string."""
    return isinstance(token, str) and token != ""


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

class WikiRegistry:
    """
    Mapping of wiki key -> WikiProfile plus the currently active profile.
    """

    def __init__(self, profiles: Mapping[str, WikiProfile], default_key: str) -> None:
        """
        Parameters
        ----------
        profiles : Mapping[str, WikiProfile]
            Initial profiles keyed by wiki identifier (usually host[:port]).

        default_key : str
            Key of the profile that is current after construction.

        Raises
        ------
        DefaultWikiMissingError
            If `default_key` is not in `profiles`.
        """
        self._lock = RLock()
        self._profiles: Dict[str, WikiProfile] = {
            key: profile.model_copy() for key, profile in profiles.items()
        }
        self._default_key = default_key

        if default_key not in self._profiles:
            raise DefaultWikiMissingError(
                f'Default wiki "{default_key}" not found in config'
            )

        self._current: WikiProfile = self._profiles[default_key]
        self._current_key = default_key

    @property
    def default_key(self) -> str:
        return self._default_key

    @property
    def current_key(self) -> str:
        """Key of the wiki most recently made current."""
        with self._lock:
            return self._current_key

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def list_profiles(self) -> Mapping[str, WikiProfile]:
        """Return a read-only snapshot of all configured profiles."""
        with self._lock:
            return MappingProxyType(dict(self._profiles))

    def get_current_profile(self) -> WikiProfile:
        with self._lock:
            return self._current

    def set_current(self, key: str) -> WikiProfile:
        """
        Make the profile stored under `key` the current one.

        Raises
        ------
        UnknownWikiError
            If `key` is not configured. The current profile is left untouched.
        """
        with self._lock:
            profile = self._profiles.get(key)
            if profile is None:
                raise UnknownWikiError(f'Wiki "{key}" not found in config')
            self._current = profile
            self._current_key = key
            logger.info("Switched current wiki to %s (%s)", key, profile.server)
            return profile

    def update_profile(self, key: str, profile: WikiProfile) -> None:
        """
        Insert or replace the profile stored under `key`.

        The current profile is not re-bound, even when `key` is the active one.
        """
        with self._lock:
            self._profiles[key] = profile.model_copy()
        logger.debug("Stored profile for %s", key)

    def reset_to_default(self) -> WikiProfile:
        """
        Restore the default wiki as the current profile.

        Raises
        ------
        DefaultWikiMissingError
            If the default key is no longer in the mapping.
        """
        with self._lock:
            profile = self._profiles.get(self._default_key)
            if profile is None:
                raise DefaultWikiMissingError(
                    f'Default wiki "{self._default_key}" not found in config'
                )
            self._current = profile
            self._current_key = self._default_key
            return profile

    # ------------------------------------------------------------------
    # Current profile accessors
    # ------------------------------------------------------------------

    def wiki_server(self) -> str:
        return self.get_current_profile().server

    def article_path(self) -> str:
        return self.get_current_profile().article_path

    def script_path(self) -> str:
        return self.get_current_profile().script_path

    def oauth_token(self) -> Optional[str]:
        token = self.get_current_profile().token
        return token if is_token_valid(token) else None

    def private_wiki(self) -> bool:
        return self.get_current_profile().private

    def site_name(self) -> str:
        return self.get_current_profile().site_name


# ---------------------------------------------------------------------
# Config discovery & loading
# ---------------------------------------------------------------------

def find_config_path(override: Optional[str] = None) -> Path:
    """
    Resolve the wiki config path: explicit override, else ./config.json.

    The returned path may not exist; callers fall back to built-in defaults.
    """
    if override:
        return Path(override).expanduser()
    return Path(DEFAULT_CONFIG_FILENAME)


def load_config(path: Path) -> WikiConfigFile:
    """
    Load and validate the wiki config document at `path`.

    A missing file is not an error: the built-in defaults are returned.

    Raises
    ------
    ConfigLoadError
        If the file exists but is unreadable, not JSON, or fails validation.
    """
    if not path.is_file():
        logger.info("No wiki config at %s, using built-in defaults", path)
        return DEFAULT_CONFIG.model_copy(deep=True)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        config = WikiConfigFile.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ConfigLoadError(
            f"Invalid wiki config {path}: {type(exc).__name__}: {exc}"
        ) from exc

    logger.info("Loaded %d wiki profile(s) from %s", len(config.wikis), path)
    return config


def build_registry(config_path: Optional[str] = None) -> WikiRegistry:
    """
    Discover, load and validate the wiki config and build a registry from it.

    Raises
    ------
    ConfigLoadError
        If the config file is invalid.

    DefaultWikiMissingError
        If `defaultWiki` does not name one of the configured wikis.
    """
    config = load_config(find_config_path(config_path))
    return WikiRegistry(config.wikis, config.default_wiki)
