"""Argument models for each tool; callers send camelCase keys."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from content_stack.models.patch import PatchOperations
from content_stack.models.release import ReleaseOptions, ReleaseType, ReleaseUpdate

DocumentIds = str | list[str]
DocumentContent = dict[str, Any]


class ToolParams(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class NoParams(ToolParams):
    pass


class DocumentIdParams(ToolParams):
    document_id: DocumentIds


class CreateDocumentParams(ToolParams):
    document: DocumentContent | list[DocumentContent]
    if_exists: Literal["fail", "ignore"] = "fail"


class EditDocumentParams(ToolParams):
    document_id: DocumentIds
    patch: PatchOperations


class DeleteDocumentParams(ToolParams):
    document_id: DocumentIds
    include_drafts: list[str] = Field(default_factory=list)
    purge: bool = False


class ReplaceDraftParams(ToolParams):
    document: DocumentContent | list[DocumentContent]


class ReleaseIdParams(ToolParams):
    release_id: str


class ReleaseDocumentParams(ReleaseIdParams):
    document_id: DocumentIds


class ReleaseContentParams(ReleaseDocumentParams):
    content: DocumentContent | None = None


class DiscardVersionParams(ToolParams):
    version_id: DocumentIds
    purge: bool = False


class CreateReleaseParams(ReleaseIdParams):
    title: str | None = None
    description: str | None = None
    release_type: ReleaseType | None = None
    intended_publish_at: str | None = None

    def options(self) -> ReleaseOptions:
        return ReleaseOptions(
            description=self.description,
            release_type=self.release_type,
            intended_publish_at=self.intended_publish_at,
        )


class UpdateReleaseParams(ReleaseIdParams):
    title: str | None = None
    description: str | None = None
    release_type: ReleaseType | None = None
    intended_publish_at: str | None = None

    def update(self) -> ReleaseUpdate:
        return ReleaseUpdate(
            title=self.title,
            description=self.description,
            release_type=self.release_type,
            intended_publish_at=self.intended_publish_at,
        )


class ScheduleReleaseParams(ReleaseIdParams):
    publish_at: str
