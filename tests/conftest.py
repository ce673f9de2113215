"""Shared fixtures: a backend client double that records what would be sent."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from content_stack.backend.transaction import Transaction
from content_stack.config import SanityConfig
from content_stack.models.results import ActionResult, MutationItem, MutationResult


def make_config(**overrides: str) -> SanityConfig:
    values = {
        "project_id": "proj",
        "dataset": "production",
        "api_version": "2025-02-19",
        "token": "secret",
        "api_host": "api.sanity.io",
    }
    values.update(overrides)
    return SanityConfig(**values)


def mutation_result(*ids: str) -> MutationResult:
    return MutationResult(
        transaction_id="tx-1",
        document_id=ids[0] if ids else None,
        results=[MutationItem(id=document_id) for document_id in ids],
    )


@pytest.fixture
def client() -> MagicMock:
    """Create a client double; transactions commit through ``client.mutate``."""
    mock = MagicMock()
    mock.config = make_config()
    mock.fetch = AsyncMock(return_value=[])
    mock.perform_actions = AsyncMock(return_value=ActionResult(transaction_id="tx-1"))
    mock.mutate = AsyncMock(return_value=mutation_result("doc"))
    mock.create = AsyncMock(return_value=mutation_result("drafts.doc"))
    mock.create_or_replace = AsyncMock(return_value=mutation_result("drafts.doc"))
    mock.create_if_not_exists = AsyncMock(return_value=mutation_result("drafts.doc"))
    mock.delete = AsyncMock(return_value=mutation_result("doc"))
    mock.transaction = lambda: Transaction(mock)
    return mock


def sent_actions(client: MagicMock) -> list[dict]:
    """Return the payloads of every action passed to ``perform_actions``."""
    return [
        action.to_payload()
        for call in client.perform_actions.await_args_list
        for action in call.args[0]
    ]


def sent_mutations(client: MagicMock) -> list[dict]:
    return [mutation for call in client.mutate.await_args_list for mutation in call.args[0]]
