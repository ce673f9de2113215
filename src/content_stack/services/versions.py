"""Document versions inside releases: create, discard, unpublish-with-release."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, NamedTuple

from content_stack.backend.api_version import ensure_release_support
from content_stack.backend.transaction import purge_visibility
from content_stack.errors import DocumentNotFoundError, ValidationError, operation_errors
from content_stack.identifiers import (
    normalize_base_id,
    normalize_draft_id,
    process_document_ids,
    require_release_id,
    version_id,
)
from content_stack.models.actions import VersionCreateAction, VersionUnpublishAction
from content_stack.models.results import VersionResult
from content_stack.orchestration.batch import commit_staged, dispatch_actions

if TYPE_CHECKING:
    from content_stack.backend.client import SanityClient
    from content_stack.backend.transaction import Transaction

logger = logging.getLogger(__name__)

# System fields the backend assigns itself; a new version must not carry them.
_SYSTEM_FIELDS = ("_rev", "_createdAt", "_updatedAt")

_CONTENT_QUERY = "*[_id in [$draftId, $publishedId]]"


class PreparedVersion(NamedTuple):
    action: VersionCreateAction
    document_id: str
    version_id: str


async def fetch_document_content(client: SanityClient, document_id: str) -> dict[str, Any]:
    """Return the current content of a document, preferring its draft."""
    base_id = normalize_base_id(document_id)
    draft_id = normalize_draft_id(base_id)
    documents = await client.fetch(
        _CONTENT_QUERY,
        {"draftId": draft_id, "publishedId": base_id},
        perspective="raw",
    )
    by_id = {document.get("_id"): document for document in documents or []}
    document = by_id.get(draft_id) or by_id.get(base_id)
    if document is None:
        raise DocumentNotFoundError(f"Document {base_id} not found")
    logger.debug("Using %s as content for %s", document["_id"], base_id)
    return {key: value for key, value in document.items() if key not in _SYSTEM_FIELDS}


async def prepare_version(
    client: SanityClient,
    release_id: str,
    document_id: str,
    content: Mapping[str, Any] | None = None,
) -> PreparedVersion:
    """Build the version-create action for one document of a release."""
    base_id = normalize_base_id(document_id)
    attributes = dict(content) if content else await fetch_document_content(client, base_id)
    if not attributes.get("_type"):
        raise ValidationError(f"Document {base_id} has no _type")
    target = version_id(release_id, base_id)
    action = VersionCreateAction(
        published_id=base_id,
        attributes={**attributes, "_id": target},
    )
    return PreparedVersion(action=action, document_id=base_id, version_id=target)


@operation_errors("create document version in release {release_id}")
async def create_document_version(
    client: SanityClient,
    release_id: str,
    document_id: str | Sequence[str],
    content: Mapping[str, Any] | None = None,
) -> VersionResult:
    """Create a version of each document inside a release.

    Every document is prepared before anything is sent, so a missing document
    fails the whole call. ``content`` replaces the fetched content for every
    document when given.
    """
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    base_ids = process_document_ids(document_id)

    prepared = [
        await prepare_version(client, release_id, base_id, content) for base_id in base_ids
    ]
    result = await dispatch_actions(client, [item.action for item in prepared])

    if isinstance(document_id, str):
        return VersionResult(
            message=f"Document version created for {base_ids[0]} in release {release_id}",
            release_id=release_id,
            version_id=prepared[0].version_id,
            document_id=base_ids[0],
            result=result,
        )
    return VersionResult(
        message=f"Created {len(prepared)} document versions for release {release_id}",
        release_id=release_id,
        version_ids=[item.version_id for item in prepared],
        document_ids=base_ids,
        count=len(prepared),
        result=result,
    )


@operation_errors("discard document version")
async def discard_document_version(
    client: SanityClient,
    version_ids: str | Sequence[str],
    *,
    purge: bool = False,
) -> VersionResult:
    """Delete one or more version documents; ``purge`` commits with async visibility."""
    ensure_release_support(client.config)
    visibility = purge_visibility(purge)

    if isinstance(version_ids, str):
        target = version_ids.strip()
        if not target:
            raise ValidationError("No valid version IDs provided")
        result = await client.delete(target, visibility=visibility)
        return VersionResult(
            message=f"Document version {target} discarded successfully",
            version_id=target,
            result=result,
        )

    targets = [item.strip() for item in version_ids if item and item.strip()]
    if not targets:
        raise ValidationError("No valid version IDs provided")

    def stage(transaction: Transaction, target: str) -> None:
        transaction.delete(target)

    result = await commit_staged(client, targets, stage, visibility=visibility)
    return VersionResult(
        message=f"Discarded {len(targets)} document versions",
        version_ids=targets,
        count=len(targets),
        result=result,
    )


@operation_errors("mark document for unpublishing in release {release_id}")
async def unpublish_document_with_release(
    client: SanityClient,
    release_id: str,
    document_id: str | Sequence[str],
) -> VersionResult:
    """Mark documents to be unpublished when the release is published."""
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    base_ids = process_document_ids(document_id)

    actions = [
        VersionUnpublishAction(version_id=version_id(release_id, base_id), published_id=base_id)
        for base_id in base_ids
    ]
    result = await dispatch_actions(client, actions)

    if isinstance(document_id, str):
        return VersionResult(
            message=(
                f"Document {base_ids[0]} marked for unpublishing with release {release_id}"
            ),
            release_id=release_id,
            version_id=actions[0].version_id,
            document_id=base_ids[0],
            result=result,
        )
    return VersionResult(
        message=(
            f"Marked {len(base_ids)} documents for unpublishing with release {release_id}"
        ),
        release_id=release_id,
        version_ids=[action.version_id for action in actions],
        document_ids=base_ids,
        count=len(base_ids),
        result=result,
    )
