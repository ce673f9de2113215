"""Tests for document operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
from conftest import make_config, mutation_result, sent_actions, sent_mutations

from content_stack.backend.client import SanityClient
from content_stack.backend.transaction import Visibility
from content_stack.errors import BackendError, ValidationError
from content_stack.models.patch import PatchOperations
from content_stack.models.results import DocumentResult, EditFailure
from content_stack.services.documents import (
    create_document,
    delete_document,
    edit_document,
    publish_document,
    replace_draft_document,
    unpublish_document,
)

if TYPE_CHECKING:
    from unittest.mock import MagicMock


class TestPublishDocument:
    """Test publishing drafts."""

    async def test_single_id_uses_singular_fields(self, client: MagicMock) -> None:
        result = await publish_document(client, "drafts.post-1")

        assert result.document_id == "post-1"
        assert result.document_ids is None
        assert sent_actions(client) == [
            {
                "actionType": "sanity.action.document.publish",
                "draftId": "drafts.post-1",
                "publishedId": "post-1",
            }
        ]

    async def test_many_ids_dispatch_once(self, client: MagicMock) -> None:
        result = await publish_document(client, ["a", "drafts.b"])

        assert result.document_ids == ["a", "b"]
        assert result.count == 2  # noqa: PLR2004
        client.perform_actions.assert_awaited_once()
        assert [action["publishedId"] for action in sent_actions(client)] == ["a", "b"]

    async def test_empty_ids_fail_before_network(self, client: MagicMock) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await publish_document(client, ["", " "])

        assert str(exc_info.value) == (
            "Failed to publish document: No valid document IDs provided"
        )
        client.perform_actions.assert_not_awaited()

    async def test_backend_error_is_annotated(self, client: MagicMock) -> None:
        client.perform_actions.side_effect = BackendError("Document not found", status_code=404)

        with pytest.raises(BackendError, match="^Failed to publish document: Document not found$"):
            await publish_document(client, "a")


class TestUnpublishDocument:
    """Test unpublishing."""

    async def test_single_reports_draft_id(self, client: MagicMock) -> None:
        result = await unpublish_document(client, "a")

        assert result.draft_id == "drafts.a"
        assert sent_actions(client) == [
            {"actionType": "sanity.action.document.unpublish", "documentId": "a"}
        ]

    async def test_many_report_draft_ids(self, client: MagicMock) -> None:
        result = await unpublish_document(client, ["a", "b"])

        assert result.draft_ids == ["drafts.a", "drafts.b"]
        assert result.count == 2  # noqa: PLR2004


class TestCreateDocument:
    """Test document creation."""

    async def test_requires_type(self, client: MagicMock) -> None:
        with pytest.raises(ValidationError, match="_type"):
            await create_document(client, {"title": "x"})
        client.create.assert_not_awaited()

    async def test_single_id_moved_to_drafts(self, client: MagicMock) -> None:
        result = await create_document(client, {"_id": "post-1", "_type": "post"})

        client.create.assert_awaited_once_with({"_id": "drafts.post-1", "_type": "post"})
        assert result.document_id == "drafts.doc"

    async def test_if_exists_ignore_uses_create_if_not_exists(self, client: MagicMock) -> None:
        await create_document(client, {"_id": "post-1", "_type": "post"}, if_exists="ignore")

        client.create_if_not_exists.assert_awaited_once_with(
            {"_id": "drafts.post-1", "_type": "post"}
        )
        client.create.assert_not_awaited()

    async def test_many_documents_commit_one_transaction(self, client: MagicMock) -> None:
        client.mutate.return_value = mutation_result("drafts.a", "drafts.b")

        result = await create_document(
            client, [{"_id": "a", "_type": "post"}, {"_type": "post", "title": "B"}]
        )

        assert sent_mutations(client) == [
            {"create": {"_id": "drafts.a", "_type": "post"}},
            {"create": {"_type": "post", "title": "B"}},
        ]
        assert result.count == 2  # noqa: PLR2004
        assert result.document_ids == ["drafts.a", "drafts.b"]

    async def test_invalid_item_fails_whole_batch(self, client: MagicMock) -> None:
        with pytest.raises(ValidationError):
            await create_document(client, [{"_type": "post"}, {"title": "no type"}])
        client.mutate.assert_not_awaited()

    async def test_empty_list_rejected(self, client: MagicMock) -> None:
        with pytest.raises(ValidationError, match="Empty array of documents provided"):
            await create_document(client, [])


class TestEditDocument:
    """Test patching drafts."""

    async def test_patches_draft_ids_in_one_transaction(self, client: MagicMock) -> None:
        result = await edit_document(
            client, ["a", "drafts.b"], PatchOperations(set={"title": "New"})
        )

        assert isinstance(result, DocumentResult)
        assert result.success is True
        assert result.document_ids == ["drafts.a", "drafts.b"]
        assert result.result.document_id == "drafts.a"
        assert sent_mutations(client) == [
            {"patch": {"id": "drafts.a", "set": {"title": "New"}}},
            {"patch": {"id": "drafts.b", "set": {"title": "New"}}},
        ]

    async def test_failure_is_returned_not_raised(self, client: MagicMock) -> None:
        client.mutate.side_effect = BackendError("Revision mismatch", status_code=409)

        result = await edit_document(
            client, "a", PatchOperations(set={"x": 1}, if_revision_id="rev-0")
        )

        assert isinstance(result, EditFailure)
        assert result.success is False
        assert result.message == "Failed to edit document: Revision mismatch"

    async def test_non_json_backend_reply_is_returned_as_failure(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>gateway</html>")
        )

        async with SanityClient(make_config(), transport=transport) as client:
            result = await edit_document(client, "a", PatchOperations(set={"x": 1}))

        assert isinstance(result, EditFailure)
        assert result.message.startswith(
            "Failed to edit document: Invalid response from /data/mutate/production"
        )

    async def test_empty_patch_returns_failure(self, client: MagicMock) -> None:
        result = await edit_document(client, "a", PatchOperations())

        assert isinstance(result, EditFailure)
        assert "No patch operations provided" in result.message
        client.mutate.assert_not_awaited()


class TestDeleteDocument:
    """Test deleting published and draft forms."""

    async def test_deletes_base_and_draft_with_sync_visibility(self, client: MagicMock) -> None:
        result = await delete_document(client, "foo")

        assert sent_mutations(client) == [
            {"delete": {"id": "foo"}},
            {"delete": {"id": "drafts.foo"}},
        ]
        assert client.mutate.await_args.kwargs["visibility"] is Visibility.SYNC
        assert result.document_id == "foo"

    async def test_purge_commits_async(self, client: MagicMock) -> None:
        await delete_document(client, "foo", purge=True)

        assert client.mutate.await_args.kwargs["visibility"] is Visibility.ASYNC

    async def test_include_drafts_are_deleted_too(self, client: MagicMock) -> None:
        await delete_document(client, "foo", include_drafts=["drafts.foo-old", ""])

        assert sent_mutations(client)[-1] == {"delete": {"id": "drafts.foo-old"}}
        assert len(sent_mutations(client)) == 3  # noqa: PLR2004

    async def test_many_ids_share_one_transaction(self, client: MagicMock) -> None:
        result = await delete_document(client, ["a", "b"], purge=True)

        client.mutate.assert_awaited_once()
        assert [m["delete"]["id"] for m in sent_mutations(client)] == [
            "a",
            "drafts.a",
            "b",
            "drafts.b",
        ]
        assert result.count == 2  # noqa: PLR2004
        assert client.mutate.await_args.kwargs["visibility"] is Visibility.ASYNC


class TestReplaceDraftDocument:
    """Test wholesale draft replacement."""

    async def test_requires_id(self, client: MagicMock) -> None:
        with pytest.raises(ValidationError, match="_id"):
            await replace_draft_document(client, {"_type": "post"})

    async def test_single_targets_draft(self, client: MagicMock) -> None:
        result = await replace_draft_document(client, {"_id": "a", "_type": "post"})

        client.create_or_replace.assert_awaited_once_with({"_id": "drafts.a", "_type": "post"})
        assert result.document_id == "drafts.a"

    async def test_many_in_one_transaction(self, client: MagicMock) -> None:
        await replace_draft_document(
            client, [{"_id": "a", "_type": "post"}, {"_id": "drafts.b", "_type": "post"}]
        )

        assert sent_mutations(client) == [
            {"createOrReplace": {"_id": "drafts.a", "_type": "post"}},
            {"createOrReplace": {"_id": "drafts.b", "_type": "post"}},
        ]
