"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

_DEFAULT_API_VERSION = "2025-02-19"


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


@dataclass(frozen=True)
class SanityConfig:
    """Connection settings for the structured-content backend."""

    project_id: str = field(default_factory=lambda: _env("SANITY_PROJECT_ID"))
    dataset: str = field(default_factory=lambda: _env("SANITY_DATASET", "production"))
    api_version: str = field(
        default_factory=lambda: _env("SANITY_API_VERSION", _DEFAULT_API_VERSION)
    )
    token: str = field(default_factory=lambda: _env("SANITY_TOKEN"))
    api_host: str = field(default_factory=lambda: _env("SANITY_API_HOST", "api.sanity.io"))
    timeout: float = field(
        default_factory=lambda: float(_env("SANITY_REQUEST_TIMEOUT", "30"))
    )

    @property
    def base_url(self) -> str:
        version = self.api_version if self.api_version.startswith("v") else f"v{self.api_version}"
        return f"https://{self.project_id}.{self.api_host}/{version}"


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "production"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    host: str = field(default_factory=lambda: _env("APP_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(_env("PORT", "3000")))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    """Top-level settings aggregating every sub-config."""

    sanity: SanityConfig = field(default_factory=SanityConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_settings() -> Settings:
    """Load settings, reading a local .env file first when one exists."""
    load_dotenv()
    return Settings()
