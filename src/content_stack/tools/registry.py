"""Tool registry: named operations with validated arguments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pydantic

from content_stack import services
from content_stack.errors import ToolNotFoundError, ValidationError
from content_stack.tools import params as p
from content_stack.tools.middleware import INITIAL_CONTEXT_TOOL, require_initial_context

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from pydantic import BaseModel

    from content_stack.backend.client import SanityClient
    from content_stack.tools.middleware import ToolSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    params: type[p.ToolParams]
    handler: Callable[[SanityClient, Any], Awaitable[BaseModel]]


def _validation_message(exc: pydantic.ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
        for error in exc.errors()
    )
    return f"Invalid arguments: {details}"


class ToolRegistry:
    """Holds the tool definitions and invokes them against one backend client."""

    def __init__(self, client: SanityClient) -> None:
        self._client = client
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> None:
        if definition.name in self._tools:
            raise ValueError(f"Tool {definition.name} is already registered")
        self._tools[definition.name] = definition

    @property
    def names(self) -> list[str]:
        return sorted(self._tools)

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(f"Unknown tool: {name}") from None

    def describe(self) -> list[dict[str, Any]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.params.model_json_schema(by_alias=True),
            }
            for tool in (self._tools[name] for name in self.names)
        ]

    @require_initial_context
    async def invoke(
        self, name: str, arguments: Mapping[str, Any], session: ToolSession
    ) -> BaseModel:
        """Validate ``arguments`` for the named tool and run it."""
        tool = self.get(name)
        try:
            parsed = tool.params.model_validate(dict(arguments))
        except pydantic.ValidationError as exc:
            raise ValidationError(_validation_message(exc)) from exc
        logger.debug("Session %s invoking %s", session.session_id, name)
        return await tool.handler(self._client, parsed)


def _definitions() -> list[ToolDefinition]:
    return [
        ToolDefinition(
            INITIAL_CONTEXT_TOOL,
            "Call this first: returns the project, dataset, usage instructions "
            "and active releases.",
            p.NoParams,
            lambda client, _: services.get_initial_context(client),
        ),
        ToolDefinition(
            "publishDocument",
            "Publish the drafts of one or more documents.",
            p.DocumentIdParams,
            lambda client, args: services.publish_document(client, args.document_id),
        ),
        ToolDefinition(
            "unpublishDocument",
            "Unpublish one or more documents, keeping them as drafts.",
            p.DocumentIdParams,
            lambda client, args: services.unpublish_document(client, args.document_id),
        ),
        ToolDefinition(
            "createDocument",
            "Create one or more draft documents; each needs a _type.",
            p.CreateDocumentParams,
            lambda client, args: services.create_document(
                client, args.document, if_exists=args.if_exists
            ),
        ),
        ToolDefinition(
            "editDocument",
            "Apply a patch (set, setIfMissing, unset, inc, dec, insert, "
            "diffMatchPatch, ifRevisionId) to the drafts of one or more documents.",
            p.EditDocumentParams,
            lambda client, args: services.edit_document(client, args.document_id, args.patch),
        ),
        ToolDefinition(
            "deleteDocument",
            "Delete the published and draft forms of one or more documents.",
            p.DeleteDocumentParams,
            lambda client, args: services.delete_document(
                client,
                args.document_id,
                include_drafts=args.include_drafts,
                purge=args.purge,
            ),
        ),
        ToolDefinition(
            "replaceDraftDocument",
            "Replace the draft of one or more documents wholesale.",
            p.ReplaceDraftParams,
            lambda client, args: services.replace_draft_document(client, args.document),
        ),
        ToolDefinition(
            "createDocumentVersion",
            "Create versions of documents inside a release.",
            p.ReleaseContentParams,
            lambda client, args: services.create_document_version(
                client, args.release_id, args.document_id, args.content
            ),
        ),
        ToolDefinition(
            "discardDocumentVersion",
            "Discard one or more document versions.",
            p.DiscardVersionParams,
            lambda client, args: services.discard_document_version(
                client, args.version_id, purge=args.purge
            ),
        ),
        ToolDefinition(
            "unpublishDocumentWithRelease",
            "Mark documents to be unpublished when a release is published.",
            p.ReleaseDocumentParams,
            lambda client, args: services.unpublish_document_with_release(
                client, args.release_id, args.document_id
            ),
        ),
        ToolDefinition(
            "createRelease",
            "Create a content release.",
            p.CreateReleaseParams,
            lambda client, args: services.create_release(
                client, args.release_id, args.title, args.options()
            ),
        ),
        ToolDefinition(
            "addDocumentToRelease",
            "Add documents to a release; documents that cannot be added are reported.",
            p.ReleaseContentParams,
            lambda client, args: services.add_document_to_release(
                client, args.release_id, args.document_id, args.content
            ),
        ),
        ToolDefinition(
            "removeDocumentFromRelease",
            "Remove documents from a release.",
            p.ReleaseDocumentParams,
            lambda client, args: services.remove_document_from_release(
                client, args.release_id, args.document_id
            ),
        ),
        ToolDefinition(
            "listReleaseDocuments",
            "List the documents in a release.",
            p.ReleaseIdParams,
            lambda client, args: services.list_release_documents(client, args.release_id),
        ),
        ToolDefinition(
            "publishRelease",
            "Publish every document in a release (at most 50).",
            p.ReleaseIdParams,
            lambda client, args: services.publish_release(client, args.release_id),
        ),
        ToolDefinition(
            "listReleases",
            "List all releases.",
            p.NoParams,
            lambda client, _: services.list_releases(client),
        ),
        ToolDefinition(
            "getRelease",
            "Get one release by ID.",
            p.ReleaseIdParams,
            lambda client, args: services.get_release(client, args.release_id),
        ),
        ToolDefinition(
            "updateRelease",
            "Update the title, description, type or intended publish time of a release.",
            p.UpdateReleaseParams,
            lambda client, args: services.update_release(client, args.release_id, args.update()),
        ),
        ToolDefinition(
            "scheduleRelease",
            "Schedule a release to publish at an ISO-8601 time.",
            p.ScheduleReleaseParams,
            lambda client, args: services.schedule_release(
                client, args.release_id, args.publish_at
            ),
        ),
        ToolDefinition(
            "unscheduleRelease",
            "Unschedule a scheduled release.",
            p.ReleaseIdParams,
            lambda client, args: services.unschedule_release(client, args.release_id),
        ),
        ToolDefinition(
            "archiveRelease",
            "Archive a release.",
            p.ReleaseIdParams,
            lambda client, args: services.archive_release(client, args.release_id),
        ),
        ToolDefinition(
            "unarchiveRelease",
            "Unarchive a release.",
            p.ReleaseIdParams,
            lambda client, args: services.unarchive_release(client, args.release_id),
        ),
        ToolDefinition(
            "deleteRelease",
            "Delete an archived release.",
            p.ReleaseIdParams,
            lambda client, args: services.delete_release(client, args.release_id),
        ),
    ]


def build_registry(client: SanityClient) -> ToolRegistry:
    """Register every tool against ``client``."""
    registry = ToolRegistry(client)
    for definition in _definitions():
        registry.register(definition)
    logger.info("Registered %d tools", len(registry.names))
    return registry
