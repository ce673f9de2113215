"""Tests for action payload serialization."""

from content_stack.models.actions import (
    PublishAction,
    ReleaseCreateAction,
    ReleaseScheduleAction,
    VersionCreateAction,
)
from content_stack.models.release import ReleaseMetadata, ReleaseOptions


class TestActionPayloads:
    """Test the wire form of actions."""

    def test_publish_payload(self) -> None:
        action = PublishAction(draft_id="drafts.a", published_id="a")

        assert action.to_payload() == {
            "actionType": "sanity.action.document.publish",
            "draftId": "drafts.a",
            "publishedId": "a",
        }

    def test_version_create_keeps_attribute_keys(self) -> None:
        action = VersionCreateAction(
            published_id="a",
            attributes={"_id": "versions.r.a", "_type": "post", "some_field": 1},
        )

        assert action.to_payload()["attributes"] == {
            "_id": "versions.r.a",
            "_type": "post",
            "some_field": 1,
        }

    def test_release_create_nests_metadata(self) -> None:
        action = ReleaseCreateAction(
            release_id="spring",
            metadata=ReleaseMetadata.for_release("spring", None, ReleaseOptions()),
        )

        assert action.to_payload() == {
            "actionType": "sanity.action.release.create",
            "releaseId": "spring",
            "metadata": {"title": "Release: spring"},
        }

    def test_schedule_payload(self) -> None:
        action = ReleaseScheduleAction(release_id="spring", publish_at="2030-01-01T00:00:00Z")

        assert action.to_payload()["publishAt"] == "2030-01-01T00:00:00Z"
