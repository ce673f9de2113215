"""Backend results and the response models returned by each operation."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from content_stack.models.release import ReleaseDocument, ReleaseSummary


class _BackendModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MutationItem(_BackendModel):
    id: str
    operation: str | None = None
    document: dict[str, Any] | None = None


class MutationResult(_BackendModel):
    """Outcome of a committed transaction or single-document mutation."""

    transaction_id: str | None = None
    document_id: str | None = None
    results: list[MutationItem] = Field(default_factory=list)

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.results]


class ActionResult(_BackendModel):
    """Outcome of one Actions API call."""

    transaction_id: str | None = None


class OperationResult(_ResultModel):
    success: bool = True
    message: str


class DocumentResult(OperationResult):
    """Result of a document mutation; singular fields for one ID, plural for many."""

    document_id: str | None = None
    document_ids: list[str] | None = None
    draft_id: str | None = None
    draft_ids: list[str] | None = None
    count: int | None = None
    result: MutationResult | ActionResult


class EditFailure(_ResultModel):
    """Returned by edit operations instead of raising."""

    success: Literal[False] = False
    message: str


EditResult = DocumentResult | EditFailure


class VersionResult(OperationResult):
    release_id: str | None = None
    version_id: str | None = None
    version_ids: list[str] | None = None
    document_id: str | None = None
    document_ids: list[str] | None = None
    count: int | None = None
    result: MutationResult | ActionResult


class ReleaseResult(OperationResult):
    release_id: str
    result: ActionResult


class ScheduleResult(ReleaseResult):
    scheduled_time: str


class PublishReleaseResult(ReleaseResult):
    document_count: int


class ReleaseMembershipResult(ReleaseResult):
    """Result of adding documents to, or removing them from, a release."""

    document_ids: list[str]
    version_ids: list[str] = Field(default_factory=list)
    count: int
    failures: list[str] = Field(default_factory=list)


class ReleaseDocumentList(_ResultModel):
    release_id: str
    document_count: int
    documents: list[ReleaseDocument]


class ReleaseList(_ResultModel):
    releases: list[dict[str, Any]]


class ReleaseLookup(_ResultModel):
    release: dict[str, Any]


class InitialContext(_ResultModel):
    message: str
    instructions: str
    project_id: str | None = None
    dataset: str | None = None
    active_releases: list[ReleaseSummary] = Field(default_factory=list)
    warning: str | None = None
    required_variables: list[str] | None = None
    note: str | None = None
