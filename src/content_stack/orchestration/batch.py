"""Batch orchestration: apply one logical operation across many identifiers.

Two failure modes exist:

* all-or-nothing: every item is staged on one fresh transaction (or folded
  into one action dispatch) and committed together; inputs are validated
  before anything is sent.
* best-effort: items are processed one at a time in input order; a failing
  item is logged and recorded while the others still go out in one combined
  dispatch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from content_stack.backend.transaction import Visibility
from content_stack.errors import BatchFailureError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from content_stack.backend.client import SanityClient
    from content_stack.backend.transaction import Transaction
    from content_stack.models.actions import Action
    from content_stack.models.results import ActionResult, MutationResult

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


@dataclass
class BatchOutcome(Generic[T]):
    """Per-item results of a best-effort batch."""

    succeeded: list[T] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failures)

    def raise_if_empty(self, description: str) -> None:
        """Raise an aggregate error listing every item failure when nothing succeeded."""
        if self.succeeded:
            return
        reasons = "; ".join(self.failures) or "no items were provided"
        raise BatchFailureError(f"{description}: {reasons}", reasons=list(self.failures))


async def collect_best_effort(
    items: Sequence[str],
    process: Callable[[str], Awaitable[T]],
) -> BatchOutcome[T]:
    """Process each item in order, isolating per-item failures."""
    outcome: BatchOutcome[T] = BatchOutcome()
    for item in items:
        try:
            outcome.succeeded.append(await process(item))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Error processing document %s", item)
            outcome.failures.append(f"Document ID {item}: {exc}")
    return outcome


async def commit_staged(
    client: SanityClient,
    items: Sequence[S],
    stage: Callable[[Transaction, S], object],
    *,
    visibility: Visibility = Visibility.SYNC,
) -> MutationResult:
    """Stage every item on one fresh transaction and commit it atomically."""
    transaction = client.transaction()
    for item in items:
        stage(transaction, item)
    logger.debug(
        "Committing %d mutation(s) for %d item(s) visibility=%s",
        len(transaction),
        len(items),
        visibility.value,
    )
    return await transaction.commit(visibility=visibility)


async def dispatch_actions(client: SanityClient, actions: Sequence[Action]) -> ActionResult:
    """Send all actions in a single Actions API call."""
    if not actions:
        raise ValidationError("No actions to dispatch")
    logger.debug(
        "Dispatching %d action(s): %s",
        len(actions),
        ", ".join(sorted({action.action_type for action in actions})),
    )
    return await client.perform_actions(actions)
