"""Business logic for documents, versions, releases and session context."""

from content_stack.services.context import get_initial_context
from content_stack.services.documents import (
    create_document,
    delete_document,
    edit_document,
    publish_document,
    replace_draft_document,
    unpublish_document,
)
from content_stack.services.releases import (
    add_document_to_release,
    archive_release,
    create_release,
    delete_release,
    get_release,
    list_release_documents,
    list_releases,
    publish_release,
    remove_document_from_release,
    schedule_release,
    unarchive_release,
    unschedule_release,
    update_release,
)
from content_stack.services.versions import (
    create_document_version,
    discard_document_version,
    unpublish_document_with_release,
)

__all__ = [
    "add_document_to_release",
    "archive_release",
    "create_document",
    "create_document_version",
    "create_release",
    "delete_document",
    "delete_release",
    "discard_document_version",
    "edit_document",
    "get_initial_context",
    "get_release",
    "list_release_documents",
    "list_releases",
    "publish_document",
    "publish_release",
    "remove_document_from_release",
    "replace_draft_document",
    "schedule_release",
    "unarchive_release",
    "unpublish_document",
    "unpublish_document_with_release",
    "unschedule_release",
    "update_release",
]
