"""Settings and provider configuration loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from newsdesk.constants import (
    TIMEOUT_SCRAPE_SECONDS,
    TIMEOUT_SOURCE_SECONDS,
    WINDOW_FRESH_MINUTES,
    WINDOW_RETENTION_DAYS,
    WINDOW_SCRAPE_STALENESS_HOURS,
)

# Load .env file
load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent


class NewsdeskSettings(BaseSettings):
    """Process-wide settings read from the environment and ``.env``.

    Every field maps to an upper-case environment variable of the same name
    (``news_api_key`` -> ``NEWS_API_KEY``). Path settings carry an explicit
    ``NEWSDESK_`` prefix.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    news_api_key: Optional[str] = None
    gnews_api_key: Optional[str] = None
    guardian_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    store_path: Path = Field(
        default=Path("data/articles.json"),
        validation_alias="NEWSDESK_STORE_PATH",
    )
    sources_path: Optional[Path] = Field(
        default=None,
        validation_alias="NEWSDESK_SOURCES_PATH",
    )
    providers_path: Optional[Path] = Field(
        default=None,
        validation_alias="NEWSDESK_PROVIDERS_PATH",
    )

    request_timeout_seconds: float = TIMEOUT_SOURCE_SECONDS
    scrape_timeout_seconds: float = TIMEOUT_SCRAPE_SECONDS
    fresh_window_minutes: int = WINDOW_FRESH_MINUTES
    retention_days: int = WINDOW_RETENTION_DAYS
    scrape_staleness_hours: int = WINDOW_SCRAPE_STALENESS_HOURS
    breaking_limit: Optional[int] = None


class TextProviderConfig(BaseModel):
    """Configuration for one text model provider."""

    priority: int
    enabled: bool = True
    model: str
    base_url: Optional[str] = None
    base_url_env: Optional[str] = None
    api_key: Optional[str] = None
    api_key_env: Optional[str] = None
    timeout: int = 60
    requires_key: bool = True

    def get_api_key(self) -> Optional[str]:
        """Get API key from config or environment."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.getenv(self.api_key_env)
        return None

    def get_base_url(self) -> Optional[str]:
        """Get base URL from environment, falling back to config."""
        if self.base_url_env and os.getenv(self.base_url_env):
            return os.getenv(self.base_url_env)
        return self.base_url

    @property
    def usable(self) -> bool:
        return self.enabled and (not self.requires_key or bool(self.get_api_key()))


class ProviderSettings(BaseModel):
    """Global provider settings."""

    fallback_on_error: bool = True
    temperature: float = 0.3
    max_tokens: int = 1024


def _default_text_providers() -> dict[str, TextProviderConfig]:
    return {
        "openai": TextProviderConfig(
            priority=1,
            model="gpt-4o-mini",
            api_key_env="OPENAI_API_KEY",
        ),
    }


class ProviderConfig(BaseModel):
    """Full provider configuration (``config/providers.yaml``)."""

    provider_settings: ProviderSettings = Field(default_factory=ProviderSettings)
    text_providers: dict[str, TextProviderConfig] = Field(default_factory=_default_text_providers)

    def get_enabled_text_providers(self) -> list[tuple[str, TextProviderConfig]]:
        """Get usable text providers sorted by priority."""
        enabled = [
            (name, config)
            for name, config in self.text_providers.items()
            if config.usable
        ]
        return sorted(enabled, key=lambda x: x[1].priority)


def load_provider_config(config_path: Optional[Path] = None) -> ProviderConfig:
    """Load provider configuration from YAML file."""
    if config_path is None:
        config_path = PROJECT_ROOT / "config" / "providers.yaml"

    if not config_path.exists():
        # Return default config if file doesn't exist
        return ProviderConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return ProviderConfig(**data)
