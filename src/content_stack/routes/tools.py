"""Tool routes — list tools and invoke one for a session."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Body, Header, HTTPException, Request

from content_stack.errors import (
    BackendError,
    BatchFailureError,
    ContentStackError,
    ContextRequiredError,
    DocumentNotFoundError,
    ReleaseLimitExceededError,
    ReleaseNotFoundError,
    ReleaseStateError,
    ToolNotFoundError,
    ValidationError,
    VersionIncompatibilityError,
)
from content_stack.tools.middleware import ToolSession

router = APIRouter(prefix="/tools", tags=["tools"])
logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"

# First match wins.
_STATUS_BY_ERROR: tuple[tuple[type[ContentStackError], int], ...] = (
    (ToolNotFoundError, HTTPStatus.NOT_FOUND),
    (DocumentNotFoundError, HTTPStatus.NOT_FOUND),
    (ReleaseNotFoundError, HTTPStatus.NOT_FOUND),
    (ContextRequiredError, HTTPStatus.CONFLICT),
    (ReleaseStateError, HTTPStatus.CONFLICT),
    (ValidationError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (VersionIncompatibilityError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (ReleaseLimitExceededError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (BatchFailureError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (BackendError, HTTPStatus.BAD_GATEWAY),
)


def status_for(exc: ContentStackError) -> int:
    """Map a content-stack error to the HTTP status returned to the caller."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return HTTPStatus.BAD_REQUEST


def _session(request: Request, session_id: str) -> ToolSession:
    sessions: dict[str, ToolSession] = request.app.state.sessions
    session = sessions.get(session_id)
    if session is None:
        session = sessions[session_id] = ToolSession(session_id=session_id)
        logger.info("Session %s opened", session_id)
    return session


@router.get("")
async def list_tools(request: Request) -> list[dict[str, Any]]:
    """Describe every registered tool and its argument schema."""
    return request.app.state.registry.describe()


@router.post("/{name}")
async def invoke_tool(
    request: Request,
    name: str,
    arguments: Annotated[dict[str, Any] | None, Body()] = None,
    x_session_id: Annotated[str | None, Header()] = None,
) -> dict[str, Any]:
    """Invoke the named tool with ``arguments`` for the caller's session."""
    registry = request.app.state.registry
    session = _session(request, x_session_id or DEFAULT_SESSION)
    try:
        registry.get(name)
        result = await registry.invoke(name, arguments or {}, session)
    except ContentStackError as exc:
        code = status_for(exc)
        logger.info("Tool %s failed with %d: %s", name, code, exc)
        raise HTTPException(status_code=code, detail=str(exc)) from exc
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)
