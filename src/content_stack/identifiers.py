"""Document identifier normalization: published, draft, version and release IDs."""

from __future__ import annotations

from collections.abc import Sequence

from content_stack.errors import ValidationError

DRAFT_PREFIX = "drafts."
VERSION_PREFIX = "versions."
RELEASE_PREFIX = "_.releases."


def normalize_base_id(document_id: str) -> str:
    """Return the published form of a document ID."""
    return document_id.removeprefix(DRAFT_PREFIX)


def normalize_draft_id(document_id: str) -> str:
    """Return the draft form of a document ID."""
    return f"{DRAFT_PREFIX}{normalize_base_id(document_id)}"


def is_draft_id(document_id: str) -> bool:
    return document_id.startswith(DRAFT_PREFIX)


def normalize_document_ids(document_ids: str | Sequence[str]) -> list[str]:
    """Return base IDs in input order, skipping empty and blank entries."""
    if isinstance(document_ids, str):
        document_ids = [document_ids]
    return [
        normalize_base_id(document_id.strip())
        for document_id in document_ids
        if document_id and document_id.strip()
    ]


def process_document_ids(document_ids: str | Sequence[str]) -> list[str]:
    """Normalize IDs, failing when no usable ID remains."""
    normalized = normalize_document_ids(document_ids)
    if not normalized:
        raise ValidationError("No valid document IDs provided")
    return normalized


def version_id(release_id: str, document_id: str) -> str:
    """Return the ID of a document's version inside a release."""
    return f"{VERSION_PREFIX}{release_id}.{normalize_base_id(document_id)}"


def base_id_from_version(version: str, release_id: str) -> str:
    """Recover the base document ID from a version ID of the given release."""
    return version.removeprefix(f"{VERSION_PREFIX}{release_id}.")


def release_document_id(release_id: str) -> str:
    """Return the system document ID under which a release is stored."""
    return f"{RELEASE_PREFIX}{release_id}"


def require_release_id(release_id: str) -> str:
    """Return the stripped release ID, failing when it is blank."""
    release_id = (release_id or "").strip()
    if not release_id:
        raise ValidationError("Release ID is required")
    return release_id
