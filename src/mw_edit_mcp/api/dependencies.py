from functools import lru_cache

from ..config import settings
from ..tools.base import ToolContext
from ..wiki.api_client import MediaWikiClient
from ..wiki.registry import WikiRegistry, build_registry


@lru_cache
def get_registry() -> WikiRegistry:
    return build_registry(settings.config_path)


@lru_cache
def get_mw_client() -> MediaWikiClient:
    return MediaWikiClient(get_registry())


def get_tool_context() -> ToolContext:
    return ToolContext(registry=get_registry(), client=get_mw_client())
