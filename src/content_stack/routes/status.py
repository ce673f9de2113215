"""Status route — server and backend health."""

from __future__ import annotations

from fastapi import APIRouter, Request

from content_stack import __version__
from content_stack.health import check_backend

router = APIRouter(tags=["status"])


@router.get("/health")
async def health(request: Request) -> dict:
    """Report server identity, backend reachability and active sessions."""
    backend = await check_backend(request.app.state.client)
    return {
        "name": "content-stack",
        "version": __version__,
        "status": "ok" if backend["status"] == "healthy" else "degraded",
        "checks": [backend],
        "sessions": len(request.app.state.sessions),
    }
