"""Tool middleware: sessions must load the initial context before anything else."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, Any

from content_stack.errors import ContextRequiredError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Mapping

logger = logging.getLogger(__name__)

INITIAL_CONTEXT_TOOL = "getInitialContext"


@dataclass
class ToolSession:
    """Per-session state kept by the server between tool calls."""

    session_id: str
    context_loaded: bool = False


def ensure_context_loaded(name: str, session: ToolSession) -> None:
    """Raise ContextRequiredError unless the call may proceed for this session."""
    if name == INITIAL_CONTEXT_TOOL or session.context_loaded:
        return
    logger.info("Session %s called %s before %s", session.session_id, name, INITIAL_CONTEXT_TOOL)
    raise ContextRequiredError(
        f"Call {INITIAL_CONTEXT_TOOL} first to load the initial context before using {name}"
    )


def require_initial_context(
    func: Callable[..., Coroutine[Any, Any, Any]],
) -> Callable[..., Coroutine[Any, Any, Any]]:
    """Gate every tool call on the session having fetched its initial context."""

    @wraps(func)
    async def wrapper(
        self: object, name: str, arguments: Mapping[str, Any], session: ToolSession
    ) -> Any:
        ensure_context_loaded(name, session)
        result = await func(self, name, arguments, session)
        if name == INITIAL_CONTEXT_TOOL:
            session.context_loaded = True
        return result

    return wrapper
