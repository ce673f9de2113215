"""Tests for API version comparison and the release support guard."""

from datetime import date

import pytest

from content_stack.backend.api_version import (
    ensure_release_support,
    is_sufficient_api_version,
    parse_api_version,
)
from content_stack.config import SanityConfig
from content_stack.errors import VersionIncompatibilityError


class TestApiVersion:
    """Test structural version comparison."""

    def test_parse_strips_prefix(self) -> None:
        assert parse_api_version("v2024-05-23") == date(2024, 5, 23)

    def test_parse_x_is_newest(self) -> None:
        assert parse_api_version("vX") == date.max

    def test_parse_invalid(self) -> None:
        assert parse_api_version("latest") is None

    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            ("2024-05-23", True),
            ("v2025-02-19", True),
            ("2024-05-22", False),
            ("2023-12-31", False),
            ("X", True),
            ("garbage", False),
        ],
    )
    def test_is_sufficient(self, current: str, expected: bool) -> None:  # noqa: FBT001
        assert is_sufficient_api_version(current, "2024-05-23") is expected


class TestEnsureReleaseSupport:
    """Test the release feature guard."""

    def test_passes_for_new_version(self) -> None:
        ensure_release_support(SanityConfig(project_id="p", api_version="2025-02-19"))

    def test_old_version_raises_with_instructions(self) -> None:
        config = SanityConfig(project_id="p", api_version="2023-01-01")

        with pytest.raises(VersionIncompatibilityError) as exc_info:
            ensure_release_support(config)

        assert "2023-01-01 is outdated" in str(exc_info.value)
        assert "SANITY_API_VERSION" in str(exc_info.value)
