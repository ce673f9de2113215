"""Data models for patches, actions, releases and operation results."""

from content_stack.models.actions import Action
from content_stack.models.patch import InsertOperation, PatchOperations, PatchSpec, build_patch
from content_stack.models.release import (
    ReleaseDocument,
    ReleaseOptions,
    ReleaseState,
    ReleaseType,
    ReleaseUpdate,
)
from content_stack.models.results import (
    ActionResult,
    DocumentResult,
    EditFailure,
    EditResult,
    MutationResult,
    VersionResult,
)

__all__ = [
    "Action",
    "ActionResult",
    "DocumentResult",
    "EditFailure",
    "EditResult",
    "InsertOperation",
    "MutationResult",
    "PatchOperations",
    "PatchSpec",
    "ReleaseDocument",
    "ReleaseOptions",
    "ReleaseState",
    "ReleaseType",
    "ReleaseUpdate",
    "VersionResult",
    "build_patch",
]
