"""Release lifecycle: creation, membership, scheduling, publishing, archiving."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from content_stack.backend.api_version import (
    REQUIRED_RELEASES_API_VERSION,
    ensure_release_support,
)
from content_stack.errors import (
    BackendError,
    ReleaseLimitExceededError,
    ReleaseNotFoundError,
    ValidationError,
    operation_errors,
)
from content_stack.identifiers import (
    base_id_from_version,
    process_document_ids,
    release_document_id,
    require_release_id,
    version_id,
)
from content_stack.models.actions import (
    DeleteAction,
    ReleaseArchiveAction,
    ReleaseCreateAction,
    ReleaseDeleteAction,
    ReleaseEditAction,
    ReleasePublishAction,
    ReleaseScheduleAction,
    ReleaseUnarchiveAction,
    ReleaseUnscheduleAction,
)
from content_stack.models.patch import PatchOperations, build_patch
from content_stack.models.release import (
    RELEASE_DOCUMENT_LIMIT,
    ReleaseDocument,
    ReleaseMetadata,
    ReleaseOptions,
    ReleaseState,
    ReleaseTransition,
    ReleaseType,
    ensure_transition,
)
from content_stack.models.results import (
    PublishReleaseResult,
    ReleaseDocumentList,
    ReleaseList,
    ReleaseLookup,
    ReleaseMembershipResult,
    ReleaseResult,
    ScheduleResult,
)
from content_stack.orchestration.batch import collect_best_effort, dispatch_actions
from content_stack.services.versions import PreparedVersion, prepare_version

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from content_stack.backend.client import SanityClient
    from content_stack.models.actions import Action
    from content_stack.models.release import ReleaseUpdate
    from content_stack.models.results import ActionResult

logger = logging.getLogger(__name__)

_MEMBERS_QUERY = "*[sanity::partOfRelease($releaseId)]{ _id, _type, title }"
_RELEASE_QUERY = "*[_id == $releaseDocumentId]"
_ALL_RELEASES_QUERY = "releases::all()"


def _creation_error(exc: BackendError) -> BackendError:
    """Translate common release-creation failures into actionable messages."""
    if "API version" in exc.message:
        message = (
            f"Make sure you're using API version {REQUIRED_RELEASES_API_VERSION} or later."
        )
    elif exc.is_not_found:
        message = (
            "The Content Releases feature might not be enabled for this project "
            "or the API token lacks permissions."
        )
    elif exc.is_auth_failure:
        message = (
            "Authentication failed. Check that your token has permission to create releases."
        )
    else:
        return exc
    return BackendError(message, status_code=exc.status_code)


def _require_publish_time(release_type: ReleaseType | None, publish_at: str | None) -> None:
    if release_type == ReleaseType.SCHEDULED and not publish_at:
        raise ValidationError("intendedPublishAt is required for scheduled releases")


async def _single_action(
    client: SanityClient, release_id: str, action: Action
) -> ActionResult:
    result = await dispatch_actions(client, [action])
    logger.info("Release %s: %s dispatched", release_id, action.action_type)
    return result


@operation_errors("create release {release_id}")
async def create_release(
    client: SanityClient,
    release_id: str,
    title: str | None = None,
    options: ReleaseOptions | None = None,
) -> ReleaseResult:
    """Create a release; the title defaults to ``Release: <id>``."""
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    options = options or ReleaseOptions()
    _require_publish_time(options.release_type, options.intended_publish_at)

    action = ReleaseCreateAction(
        release_id=release_id,
        metadata=ReleaseMetadata.for_release(release_id, title, options),
    )
    try:
        result = await _single_action(client, release_id, action)
    except BackendError as exc:
        raise _creation_error(exc) from exc
    return ReleaseResult(
        message=f"Release {release_id} created successfully",
        release_id=release_id,
        result=result,
    )


@operation_errors("add document to release {release_id}")
async def add_document_to_release(
    client: SanityClient,
    release_id: str,
    document_ids: str | Sequence[str],
    content: Mapping[str, Any] | None = None,
) -> ReleaseMembershipResult:
    """Add documents to a release, skipping the ones that cannot be prepared.

    The call fails only when no document could be prepared; otherwise the
    prepared versions are created in one dispatch and the message carries a
    warning with the number of skipped documents.
    """
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    base_ids = process_document_ids(document_ids)

    async def prepare(document_id: str) -> PreparedVersion:
        return await prepare_version(client, release_id, document_id, content)

    outcome = await collect_best_effort(base_ids, prepare)
    outcome.raise_if_empty("Failed to add any documents to release")

    result = await dispatch_actions(client, [item.action for item in outcome.succeeded])

    added = [item.document_id for item in outcome.succeeded]
    message = f"{len(added)} document(s) added to release {release_id} successfully"
    if outcome.failures:
        message += f". Warning: {len(outcome.failures)} document(s) could not be added"
        logger.warning(
            "Some documents could not be added to release %s: %s",
            release_id,
            "; ".join(outcome.failures),
        )
    return ReleaseMembershipResult(
        message=message,
        release_id=release_id,
        document_ids=added,
        version_ids=[item.version_id for item in outcome.succeeded],
        count=len(added),
        failures=outcome.failures,
        result=result,
    )


@operation_errors("remove document from release {release_id}")
async def remove_document_from_release(
    client: SanityClient,
    release_id: str,
    document_ids: str | Sequence[str],
) -> ReleaseMembershipResult:
    """Delete the release versions of the given documents in one dispatch."""
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    base_ids = process_document_ids(document_ids)

    version_ids = [version_id(release_id, base_id) for base_id in base_ids]
    result = await dispatch_actions(
        client, [DeleteAction(document_id=target) for target in version_ids]
    )
    return ReleaseMembershipResult(
        message=f"{len(base_ids)} document(s) removed from release {release_id} successfully",
        release_id=release_id,
        document_ids=base_ids,
        version_ids=version_ids,
        count=len(base_ids),
        result=result,
    )


async def _list_documents(client: SanityClient, release_id: str) -> list[ReleaseDocument]:
    documents = await client.fetch(
        _MEMBERS_QUERY, {"releaseId": release_id}, perspective="raw"
    )
    return [
        ReleaseDocument(
            version_id=document["_id"],
            document_id=base_id_from_version(document["_id"], release_id),
            type=document.get("_type", ""),
            title=document.get("title") or f"Untitled {document.get('_type', 'document')}",
        )
        for document in documents or []
    ]


@operation_errors("retrieve documents for release {release_id}")
async def list_release_documents(client: SanityClient, release_id: str) -> ReleaseDocumentList:
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    documents = await _list_documents(client, release_id)
    return ReleaseDocumentList(
        release_id=release_id,
        document_count=len(documents),
        documents=documents,
    )


@operation_errors("publish release {release_id}")
async def publish_release(client: SanityClient, release_id: str) -> PublishReleaseResult:
    """Publish every version in a release at once.

    A release holding more than 50 versions is refused before the publish
    action is sent.
    """
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)

    documents = await _list_documents(client, release_id)
    if len(documents) > RELEASE_DOCUMENT_LIMIT:
        raise ReleaseLimitExceededError(
            f"Release contains {len(documents)} documents, which exceeds the "
            f"{RELEASE_DOCUMENT_LIMIT} document limit"
        )

    result = await _single_action(client, release_id, ReleasePublishAction(release_id=release_id))
    return PublishReleaseResult(
        message=f"Release {release_id} published successfully",
        release_id=release_id,
        document_count=len(documents),
        result=result,
    )


@operation_errors("retrieve releases")
async def list_releases(client: SanityClient) -> ReleaseList:
    ensure_release_support(client.config)
    releases = await client.fetch(_ALL_RELEASES_QUERY)
    return ReleaseList(releases=releases or [])


async def _fetch_release(client: SanityClient, release_id: str) -> dict[str, Any]:
    releases = await client.fetch(
        _RELEASE_QUERY, {"releaseDocumentId": release_document_id(release_id)}
    )
    if not releases:
        raise ReleaseNotFoundError(f"Release with ID {release_id} not found")
    return releases[0]


def _current_state(release: Mapping[str, Any]) -> ReleaseState | None:
    try:
        return ReleaseState(release.get("state"))
    except ValueError:
        return None


async def _check_transition(
    client: SanityClient, release_id: str, transition: ReleaseTransition
) -> None:
    release = await _fetch_release(client, release_id)
    state = _current_state(release)
    if state is None:
        logger.debug("Release %s reports unknown state %r", release_id, release.get("state"))
        return
    ensure_transition(release_id, state, transition)


@operation_errors("get release {release_id}")
async def get_release(client: SanityClient, release_id: str) -> ReleaseLookup:
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    return ReleaseLookup(release=await _fetch_release(client, release_id))


@operation_errors("update release {release_id}")
async def update_release(
    client: SanityClient, release_id: str, update: ReleaseUpdate
) -> ReleaseResult:
    """Change only the supplied metadata fields of a release."""
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    _require_publish_time(update.release_type, update.intended_publish_at)

    spec = build_patch(PatchOperations(set=update.metadata_fields()), release_id)
    if not spec:
        raise ValidationError("No release fields to update")

    action = ReleaseEditAction(release_id=release_id, patch=spec.as_patch())
    result = await _single_action(client, release_id, action)
    return ReleaseResult(
        message=f"Release {release_id} updated successfully",
        release_id=release_id,
        result=result,
    )


def _parse_publish_time(publish_at: str) -> None:
    try:
        datetime.fromisoformat(publish_at)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Invalid publish time {publish_at!r}; expected an ISO-8601 timestamp"
        ) from exc


@operation_errors("schedule release {release_id}")
async def schedule_release(
    client: SanityClient, release_id: str, publish_at: str
) -> ScheduleResult:
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    _parse_publish_time(publish_at)
    await _check_transition(client, release_id, ReleaseTransition.SCHEDULE)

    action = ReleaseScheduleAction(release_id=release_id, publish_at=publish_at)
    result = await _single_action(client, release_id, action)
    return ScheduleResult(
        message=f"Release {release_id} scheduled for {publish_at}",
        release_id=release_id,
        scheduled_time=publish_at,
        result=result,
    )


@operation_errors("unschedule release {release_id}")
async def unschedule_release(client: SanityClient, release_id: str) -> ReleaseResult:
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    await _check_transition(client, release_id, ReleaseTransition.UNSCHEDULE)

    action = ReleaseUnscheduleAction(release_id=release_id)
    result = await _single_action(client, release_id, action)
    return ReleaseResult(
        message=f"Release {release_id} unscheduled successfully",
        release_id=release_id,
        result=result,
    )


@operation_errors("archive release {release_id}")
async def archive_release(client: SanityClient, release_id: str) -> ReleaseResult:
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    result = await _single_action(client, release_id, ReleaseArchiveAction(release_id=release_id))
    return ReleaseResult(
        message=f"Release {release_id} archived successfully",
        release_id=release_id,
        result=result,
    )


@operation_errors("unarchive release {release_id}")
async def unarchive_release(client: SanityClient, release_id: str) -> ReleaseResult:
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    action = ReleaseUnarchiveAction(release_id=release_id)
    result = await _single_action(client, release_id, action)
    return ReleaseResult(
        message=f"Release {release_id} unarchived successfully",
        release_id=release_id,
        result=result,
    )


@operation_errors("delete release {release_id}")
async def delete_release(client: SanityClient, release_id: str) -> ReleaseResult:
    """Delete a release; the backend only accepts this for archived releases."""
    ensure_release_support(client.config)
    release_id = require_release_id(release_id)
    result = await _single_action(client, release_id, ReleaseDeleteAction(release_id=release_id))
    return ReleaseResult(
        message=f"Release {release_id} deleted successfully",
        release_id=release_id,
        result=result,
    )
