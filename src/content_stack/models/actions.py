"""Declarative actions submitted to the backend Actions API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from content_stack.models.release import ReleaseMetadata


class Action(BaseModel):
    """Base for every action; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    action_type: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class PublishAction(Action):
    action_type: Literal["sanity.action.document.publish"] = "sanity.action.document.publish"
    draft_id: str
    published_id: str


class UnpublishAction(Action):
    action_type: Literal["sanity.action.document.unpublish"] = "sanity.action.document.unpublish"
    document_id: str


class DeleteAction(Action):
    action_type: Literal["sanity.action.document.delete"] = "sanity.action.document.delete"
    document_id: str


class VersionCreateAction(Action):
    action_type: Literal["sanity.action.document.version.create"] = (
        "sanity.action.document.version.create"
    )
    published_id: str
    attributes: dict[str, Any]


class VersionUnpublishAction(Action):
    action_type: Literal["sanity.action.document.version.unpublish"] = (
        "sanity.action.document.version.unpublish"
    )
    version_id: str
    published_id: str


class ReleaseCreateAction(Action):
    action_type: Literal["sanity.action.release.create"] = "sanity.action.release.create"
    release_id: str
    metadata: ReleaseMetadata


class ReleaseEditAction(Action):
    action_type: Literal["sanity.action.release.edit"] = "sanity.action.release.edit"
    release_id: str
    patch: dict[str, Any]


class ReleaseScheduleAction(Action):
    action_type: Literal["sanity.action.release.schedule"] = "sanity.action.release.schedule"
    release_id: str
    publish_at: str


class ReleaseUnscheduleAction(Action):
    action_type: Literal["sanity.action.release.unschedule"] = "sanity.action.release.unschedule"
    release_id: str


class ReleasePublishAction(Action):
    action_type: Literal["sanity.action.release.publish"] = "sanity.action.release.publish"
    release_id: str


class ReleaseArchiveAction(Action):
    action_type: Literal["sanity.action.release.archive"] = "sanity.action.release.archive"
    release_id: str


class ReleaseUnarchiveAction(Action):
    action_type: Literal["sanity.action.release.unarchive"] = "sanity.action.release.unarchive"
    release_id: str


class ReleaseDeleteAction(Action):
    action_type: Literal["sanity.action.release.delete"] = "sanity.action.release.delete"
    release_id: str
