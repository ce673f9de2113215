"""Batch orchestration components."""

from content_stack.orchestration.batch import (
    BatchOutcome,
    collect_best_effort,
    commit_staged,
    dispatch_actions,
)

__all__ = ["BatchOutcome", "collect_best_effort", "commit_staged", "dispatch_actions"]
