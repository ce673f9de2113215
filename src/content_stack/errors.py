"""Exception hierarchy for content operations.

Local checks raise before any network I/O. Backend failures are converted
into ``BackendError`` by the client. Each public operation annotates errors
once with its own context (``Failed to <operation>: ...``) and re-raises.
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, Self, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

logger = logging.getLogger(__name__)

_HTTP_NOT_FOUND = 404
_HTTP_AUTH_FAILURES = (401, 403)

P = ParamSpec("P")
R = TypeVar("R")


class ContentStackError(Exception):
    """Base exception for content-stack."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def add_context(self, operation: str) -> Self:
        """Prefix the message with the operation that failed."""
        self.message = f"Failed to {operation}: {self.message}"
        self.args = (self.message,)
        return self


class ValidationError(ContentStackError):
    """Malformed or empty input, rejected before any backend call."""


class VersionIncompatibilityError(ContentStackError):
    """The configured API version is too old for the requested feature."""


class BackendError(ContentStackError):
    """A query, mutation or action request failed at the backend."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == _HTTP_NOT_FOUND or "not found" in self.message.lower()

    @property
    def is_auth_failure(self) -> bool:
        return (
            self.status_code in _HTTP_AUTH_FAILURES
            or "not authorized" in self.message.lower()
        )


class DocumentNotFoundError(ContentStackError):
    """No draft or published form exists for the requested document."""


class ReleaseNotFoundError(ContentStackError):
    """No release exists with the requested ID."""


class ReleaseStateError(ContentStackError):
    """A release transition is not allowed from the release's current state."""


class ReleaseLimitExceededError(ContentStackError):
    """A release holds more document versions than can be published together."""


class BatchFailureError(ContentStackError):
    """Every item of a best-effort batch failed."""

    def __init__(self, message: str, *, reasons: list[str]) -> None:
        super().__init__(message)
        self.reasons = reasons


class ContextRequiredError(ContentStackError):
    """A tool was invoked before the session fetched its initial context."""


class ToolNotFoundError(ContentStackError):
    """No tool is registered under the requested name."""


def _label_arguments(arguments: Mapping[str, Any]) -> dict[str, Any]:
    return {
        name: value.strip() if isinstance(value, str) else value
        for name, value in arguments.items()
    }


def operation_errors(
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Log and annotate content-stack errors raised by a public operation.

    ``operation`` may reference the wrapped function's arguments by name, e.g.
    ``"publish release {release_id}"``.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except ContentStackError as exc:
                bound = signature.bind(*args, **kwargs)
                label = operation.format_map(_label_arguments(bound.arguments))
                logger.error("Error during %s: %s", label, exc)  # noqa: TRY400
                exc.add_context(label)
                raise

        return wrapper

    return decorator
