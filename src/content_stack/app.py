"""Server entry point — FastAPI app exposing the content tools."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI

from content_stack import __version__
from content_stack.backend.client import SanityClient
from content_stack.config import load_settings
from content_stack.logging import configure_logging
from content_stack.routes.status import router as status_router
from content_stack.routes.tools import router as tools_router
from content_stack.tools.registry import build_registry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the backend client for the lifetime of the app."""
    settings = load_settings()
    configure_logging(settings.app.log_level)

    if not settings.sanity.project_id:
        logger.warning("SANITY_PROJECT_ID is not set; only getInitialContext will be useful")

    client = SanityClient(settings.sanity)
    await client.initialize()

    app.state.settings = settings
    app.state.client = client
    app.state.registry = build_registry(client)
    app.state.sessions = {}
    logger.info("Server started (env=%s)", settings.app.env)

    yield

    logger.info("Server shutting down")
    await client.close()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(title="content-stack", version=__version__, lifespan=lifespan)
    app.include_router(status_router)
    app.include_router(tools_router)
    return app


def main() -> None:
    """Entry point for the server process."""
    settings = load_settings()
    uvicorn.run(
        create_app(),
        host=settings.app.host,
        port=settings.app.port,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    main()
