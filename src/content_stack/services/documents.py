"""Document business logic: publish, unpublish, create, edit, delete, replace drafts."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Literal

from content_stack.backend.transaction import purge_visibility
from content_stack.errors import ContentStackError, ValidationError, operation_errors
from content_stack.identifiers import (
    is_draft_id,
    normalize_draft_id,
    process_document_ids,
)
from content_stack.models.actions import PublishAction, UnpublishAction
from content_stack.models.patch import build_patch
from content_stack.models.results import DocumentResult, EditFailure
from content_stack.orchestration.batch import commit_staged, dispatch_actions

if TYPE_CHECKING:
    from collections.abc import Callable

    from content_stack.backend.client import SanityClient
    from content_stack.backend.transaction import Transaction
    from content_stack.models.patch import PatchOperations, PatchSpec
    from content_stack.models.results import EditResult

logger = logging.getLogger(__name__)

ContentObject = Mapping[str, Any]
IfExists = Literal["fail", "ignore"]


@operation_errors("publish document")
async def publish_document(
    client: SanityClient, document_id: str | Sequence[str]
) -> DocumentResult:
    """Publish the draft of one or more documents in a single action dispatch."""
    base_ids = process_document_ids(document_id)
    actions = [
        PublishAction(draft_id=normalize_draft_id(base_id), published_id=base_id)
        for base_id in base_ids
    ]
    result = await dispatch_actions(client, actions)

    if isinstance(document_id, str):
        return DocumentResult(
            message=f"Document {base_ids[0]} published successfully",
            document_id=base_ids[0],
            result=result,
        )
    return DocumentResult(
        message=f"Published {len(base_ids)} documents successfully",
        document_ids=base_ids,
        count=len(base_ids),
        result=result,
    )


@operation_errors("unpublish document")
async def unpublish_document(
    client: SanityClient, document_id: str | Sequence[str]
) -> DocumentResult:
    """Unpublish one or more documents, keeping them as drafts."""
    base_ids = process_document_ids(document_id)
    actions = [UnpublishAction(document_id=base_id) for base_id in base_ids]
    result = await dispatch_actions(client, actions)

    if isinstance(document_id, str):
        return DocumentResult(
            message=f"Document {base_ids[0]} unpublished successfully",
            draft_id=normalize_draft_id(base_ids[0]),
            result=result,
        )
    return DocumentResult(
        message=f"Unpublished {len(base_ids)} documents successfully",
        draft_ids=[normalize_draft_id(base_id) for base_id in base_ids],
        count=len(base_ids),
        result=result,
    )


def prepare_for_creation(document: ContentObject) -> dict[str, Any]:
    """Require a ``_type`` and move any supplied ``_id`` into the drafts namespace."""
    if not document.get("_type"):
        raise ValidationError("Document must have a _type field")
    prepared = dict(document)
    document_id = prepared.get("_id")
    if isinstance(document_id, str) and document_id and not is_draft_id(document_id):
        prepared["_id"] = normalize_draft_id(document_id)
    return prepared


def prepare_for_replacement(document: ContentObject) -> dict[str, Any]:
    """Require ``_type`` and ``_id``; the replacement always targets the draft."""
    if not document.get("_type"):
        raise ValidationError("Document must have a _type field")
    document_id = document.get("_id")
    if not isinstance(document_id, str) or not document_id:
        raise ValidationError("Document must have an _id field to replace")
    return {**document, "_id": normalize_draft_id(document_id)}


def _stage_create(if_exists: IfExists) -> Callable[[Transaction, dict[str, Any]], None]:
    def stage(transaction: Transaction, document: dict[str, Any]) -> None:
        if if_exists == "ignore" and document.get("_id"):
            transaction.create_if_not_exists(document)
        else:
            transaction.create(document)

    return stage


@operation_errors("create document")
async def create_document(
    client: SanityClient,
    documents: ContentObject | Sequence[ContentObject],
    *,
    if_exists: IfExists = "fail",
) -> DocumentResult:
    """Create one document, or many in a single transaction.

    With ``if_exists="ignore"`` documents carrying an ``_id`` are created only
    when absent, which makes seeding idempotent.
    """
    if isinstance(documents, Mapping):
        document = prepare_for_creation(documents)
        if if_exists == "ignore" and document.get("_id"):
            result = await client.create_if_not_exists(document)
        else:
            result = await client.create(document)
        created_id = result.document_id or document.get("_id")
        return DocumentResult(
            message=f"Document created successfully with ID: {created_id}",
            document_id=created_id,
            result=result,
        )

    if not documents:
        raise ValidationError("Empty array of documents provided")
    prepared = [prepare_for_creation(document) for document in documents]
    result = await commit_staged(client, prepared, _stage_create(if_exists))
    return DocumentResult(
        message=f"{len(prepared)} documents created successfully",
        document_ids=result.ids,
        count=len(prepared),
        result=result,
    )


async def edit_document(
    client: SanityClient,
    document_id: str | Sequence[str],
    patch: PatchOperations,
) -> EditResult:
    """Apply the same patch to the draft of every document in one transaction.

    Unlike the other operations, failures are returned as an ``EditFailure``
    instead of being raised.
    """
    try:
        draft_ids = [normalize_draft_id(base_id) for base_id in process_document_ids(document_id)]
        specs = [build_patch(patch, draft_id) for draft_id in draft_ids]
        if not specs[0]:
            raise ValidationError("No patch operations provided")

        def stage(transaction: Transaction, spec: PatchSpec) -> None:
            transaction.patch(spec)

        result = await commit_staged(client, specs, stage)
    except ContentStackError as exc:
        logger.warning("Error editing document %s: %s", document_id, exc)
        return EditFailure(message=f"Failed to edit document: {exc}")

    result.document_id = draft_ids[0]
    return DocumentResult(
        message=f"Successfully edited {len(draft_ids)} document(s)",
        document_ids=draft_ids,
        count=len(draft_ids),
        result=result,
    )


@operation_errors("delete document")
async def delete_document(
    client: SanityClient,
    document_id: str | Sequence[str],
    *,
    include_drafts: Sequence[str] = (),
    purge: bool = False,
) -> DocumentResult:
    """Delete the published and draft forms of each document in one transaction.

    ``include_drafts`` names extra draft IDs to remove; ``purge`` commits with
    async visibility, used when the full history should be removed.
    """
    base_ids = process_document_ids(document_id)
    targets: list[str] = []
    for base_id in base_ids:
        targets.extend((base_id, normalize_draft_id(base_id)))
    targets.extend(draft for draft in include_drafts if draft)

    def stage(transaction: Transaction, target: str) -> None:
        transaction.delete(target)

    result = await commit_staged(client, targets, stage, visibility=purge_visibility(purge))

    if isinstance(document_id, str):
        return DocumentResult(
            message=f"Document {base_ids[0]} deleted successfully",
            document_id=base_ids[0],
            result=result,
        )
    return DocumentResult(
        message=f"{len(base_ids)} documents deleted successfully",
        document_ids=base_ids,
        count=len(base_ids),
        result=result,
    )


@operation_errors("replace draft document")
async def replace_draft_document(
    client: SanityClient,
    documents: ContentObject | Sequence[ContentObject],
) -> DocumentResult:
    """Replace the draft of one or more documents wholesale."""
    if isinstance(documents, Mapping):
        document = prepare_for_replacement(documents)
        result = await client.create_or_replace(document)
        return DocumentResult(
            message=f"Draft document {document['_id']} replaced successfully",
            document_id=document["_id"],
            result=result,
        )

    if not documents:
        raise ValidationError("Empty array of documents provided")
    prepared = [prepare_for_replacement(document) for document in documents]

    def stage(transaction: Transaction, document: dict[str, Any]) -> None:
        transaction.create_or_replace(document)

    result = await commit_staged(client, prepared, stage)
    return DocumentResult(
        message=f"{len(prepared)} draft documents replaced successfully",
        document_ids=[document["_id"] for document in prepared],
        count=len(prepared),
        result=result,
    )
