"""Backend API version comparison and the Content Releases version guard."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from content_stack.errors import VersionIncompatibilityError

if TYPE_CHECKING:
    from content_stack.config import SanityConfig

REQUIRED_RELEASES_API_VERSION = "2024-05-23"


def parse_api_version(version: str) -> date | None:
    """Parse ``v2024-05-23``/``2024-05-23`` into a date; ``vX`` is the newest version."""
    value = version.strip().removeprefix("v")
    if value.upper() == "X":
        return date.max
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_sufficient_api_version(current: str, required: str) -> bool:
    """Compare two API versions as dates; unparseable versions are never sufficient."""
    current_date = parse_api_version(current)
    required_date = parse_api_version(required)
    if current_date is None or required_date is None:
        return False
    return current_date >= required_date


def ensure_release_support(config: SanityConfig) -> None:
    """Fail fast when the configured API version predates Content Releases."""
    if is_sufficient_api_version(config.api_version, REQUIRED_RELEASES_API_VERSION):
        return
    raise VersionIncompatibilityError(
        f"API version {config.api_version} is outdated. Please update to version "
        f"{REQUIRED_RELEASES_API_VERSION} or later to use Content Releases. "
        "You can do this by setting SANITY_API_VERSION in your environment or .env file."
    )
