"""Backend reachability probe used by the health route."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from content_stack.errors import ContentStackError

if TYPE_CHECKING:
    from content_stack.backend.client import SanityClient

logger = logging.getLogger(__name__)

_PROBE_QUERY = "now()"


async def check_backend(client: SanityClient) -> dict[str, Any]:
    """Run a trivial query and report whether the backend answered."""
    started_at = time.monotonic()
    try:
        await client.fetch(_PROBE_QUERY)
    except ContentStackError as exc:
        logger.warning("Backend health check failed: %s", exc)
        return {"name": "backend", "status": "unhealthy", "error": str(exc)}
    latency_ms = (time.monotonic() - started_at) * 1000
    return {"name": "backend", "status": "healthy", "latency_ms": round(latency_ms, 1)}
