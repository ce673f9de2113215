"""Transaction builder: stages mutations and commits them atomically."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from content_stack.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from content_stack.backend.client import SanityClient
    from content_stack.models.patch import PatchSpec
    from content_stack.models.results import MutationResult


class Visibility(StrEnum):
    """``sync`` waits for the change to be queryable; ``async`` returns immediately."""

    SYNC = "sync"
    ASYNC = "async"


def purge_visibility(purge: bool) -> Visibility:
    """Purging skips waiting for consistency."""
    return Visibility.ASYNC if purge else Visibility.SYNC


class Transaction:
    """An ordered set of mutations committed in one request.

    Either every staged mutation is applied or none is. A builder belongs to a
    single call and is not safe to stage onto concurrently.
    """

    def __init__(self, client: SanityClient) -> None:
        self._client = client
        self._mutations: list[dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._mutations)

    @property
    def mutations(self) -> list[dict[str, Any]]:
        return list(self._mutations)

    def create(self, document: Mapping[str, Any]) -> Transaction:
        self._mutations.append({"create": dict(document)})
        return self

    def create_or_replace(self, document: Mapping[str, Any]) -> Transaction:
        _require_id(document, "createOrReplace")
        self._mutations.append({"createOrReplace": dict(document)})
        return self

    def create_if_not_exists(self, document: Mapping[str, Any]) -> Transaction:
        _require_id(document, "createIfNotExists")
        self._mutations.append({"createIfNotExists": dict(document)})
        return self

    def delete(self, document_id: str) -> Transaction:
        self._mutations.append({"delete": {"id": document_id}})
        return self

    def patch(self, spec: PatchSpec) -> Transaction:
        self._mutations.append(spec.to_mutation())
        return self

    async def commit(self, *, visibility: Visibility = Visibility.SYNC) -> MutationResult:
        """Send every staged mutation to the backend in one atomic request."""
        if not self._mutations:
            raise ValidationError("Cannot commit an empty transaction")
        return await self._client.mutate(self._mutations, visibility=visibility)


def _require_id(document: Mapping[str, Any], operation: str) -> None:
    if not document.get("_id"):
        raise ValidationError(f"Document must have an _id field for {operation}")
