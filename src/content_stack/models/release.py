"""Release models and the release lifecycle state machine."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from content_stack.errors import ReleaseStateError

RELEASE_DOCUMENT_LIMIT = 50


class ReleaseType(StrEnum):
    ASAP = "asap"
    SCHEDULED = "scheduled"


class ReleaseState(StrEnum):
    """Lifecycle states reported by the backend for a release."""

    ACTIVE = "active"
    SCHEDULING = "scheduling"
    SCHEDULED = "scheduled"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    ARCHIVING = "archiving"
    ARCHIVED = "archived"
    UNARCHIVING = "unarchiving"
    DELETED = "deleted"


class ReleaseTransition(StrEnum):
    SCHEDULE = "schedule"
    UNSCHEDULE = "unschedule"
    PUBLISH = "publish"
    ARCHIVE = "archive"
    UNARCHIVE = "unarchive"
    DELETE = "delete"


# Transitions missing from this table are not checked client-side.
_ALLOWED_FROM: dict[ReleaseTransition, frozenset[ReleaseState]] = {
    ReleaseTransition.SCHEDULE: frozenset(ReleaseState)
    - {ReleaseState.PUBLISHED, ReleaseState.PUBLISHING, ReleaseState.DELETED},
    ReleaseTransition.UNSCHEDULE: frozenset({ReleaseState.SCHEDULED}),
}

INACTIVE_STATES = frozenset(
    {ReleaseState.ARCHIVED, ReleaseState.PUBLISHED, ReleaseState.DELETED}
)


def ensure_transition(
    release_id: str, state: ReleaseState, transition: ReleaseTransition
) -> None:
    """Raise ReleaseStateError when ``transition`` is not allowed from ``state``."""
    allowed = _ALLOWED_FROM.get(transition)
    if allowed is None or state in allowed:
        return
    raise ReleaseStateError(
        f"Cannot {transition.value} release {release_id} while it is {state.value}"
    )


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReleaseOptions(_CamelModel):
    """Optional metadata supplied when creating a release."""

    description: str | None = None
    release_type: ReleaseType | None = None
    intended_publish_at: str | None = None


class ReleaseUpdate(_CamelModel):
    """Metadata fields to change on an existing release."""

    title: str | None = None
    description: str | None = None
    release_type: ReleaseType | None = None
    intended_publish_at: str | None = None

    def metadata_fields(self) -> dict[str, Any]:
        """Return the provided fields keyed by their backend metadata path."""
        fields = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        return {f"metadata.{name}": value for name, value in fields.items() if value}


class ReleaseMetadata(_CamelModel):
    title: str
    description: str | None = None
    release_type: ReleaseType | None = None
    intended_publish_at: str | None = None

    @classmethod
    def for_release(
        cls, release_id: str, title: str | None, options: ReleaseOptions
    ) -> ReleaseMetadata:
        return cls(
            title=title or f"Release: {release_id}",
            description=options.description or None,
            release_type=options.release_type,
            intended_publish_at=options.intended_publish_at or None,
        )


class ReleaseDocument(_CamelModel):
    """A version document that belongs to a release."""

    version_id: str
    document_id: str
    type: str
    title: str


class ReleaseSummary(_CamelModel):
    """Compact view of a release used by the initial context."""

    id: str
    title: str | None = None
    state: ReleaseState | str | None = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> ReleaseSummary:
        metadata = document.get("metadata") or {}
        return cls(
            id=document.get("name") or document.get("_id", ""),
            title=metadata.get("title"),
            state=document.get("state"),
        )

