from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Explicit wiki config file; falls back to ./config.json, then built-in defaults
    config_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MW_EDIT_CONFIG", "CONFIG"),
    )

    request_timeout: float = 15.0  # seconds
    user_agent: str = "mw-edit-mcp/1.0 (MediaWiki MCP Server)"

    server_name: str = "mw-edit-mcp"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
