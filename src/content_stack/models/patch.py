"""Patch operations and the sparse patch specification built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InsertOperation(BaseModel):
    """Insert ``items`` relative to an array path."""

    position: Literal["before", "after", "replace"]
    path: str
    items: list[Any]

    def to_dict(self) -> dict[str, Any]:
        return {self.position: self.path, "items": list(self.items)}


class PatchOperations(BaseModel):
    """Field-level operations a caller wants applied to one document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    set: dict[str, Any] | None = None
    set_if_missing: dict[str, Any] | None = None
    unset: list[str] | None = None
    inc: dict[str, int | float] | None = None
    dec: dict[str, int | float] | None = None
    insert: InsertOperation | None = None
    diff_match_patch: dict[str, str] | None = None
    if_revision_id: str | None = None


# Emission order of the patch groups.
_GROUPS = (
    "set",
    "set_if_missing",
    "unset",
    "inc",
    "dec",
    "insert",
    "diff_match_patch",
    "if_revision_id",
)


@dataclass(frozen=True)
class PatchSpec:
    """A patch for a single document, holding only the populated groups."""

    document_id: str
    operations: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.operations)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.operations)

    def as_patch(self) -> dict[str, Any]:
        return {"id": self.document_id, **self.operations}

    def to_mutation(self) -> dict[str, Any]:
        return {"patch": self.as_patch()}


def build_patch(operations: PatchOperations, document_id: str) -> PatchSpec:
    """Build a sparse patch spec; empty groups are left out entirely.

    ``ifRevisionId`` is passed through untouched and enforced by the backend.
    """
    spec: dict[str, Any] = {}
    for name in _GROUPS:
        value = getattr(operations, name)
        if not value:
            continue
        if isinstance(value, InsertOperation):
            value = value.to_dict()
        elif isinstance(value, dict):
            value = dict(value)
        elif isinstance(value, list):
            value = list(value)
        spec[to_camel(name)] = value
    return PatchSpec(document_id=document_id, operations=spec)
