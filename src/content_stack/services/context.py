"""Initial context handed to a session before any other tool runs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from content_stack.errors import ContentStackError
from content_stack.models.release import INACTIVE_STATES, ReleaseSummary
from content_stack.models.results import InitialContext
from content_stack.services.releases import list_releases

if TYPE_CHECKING:
    from content_stack.backend.client import SanityClient

logger = logging.getLogger(__name__)

WELCOME = "Welcome to the content-stack server!"
REQUIRED_VARIABLES = ["SANITY_PROJECT_ID", "SANITY_DATASET", "SANITY_TOKEN"]


async def get_initial_context(client: SanityClient) -> InitialContext:
    """Describe the configured project and its active releases.

    Never raises: a missing project ID or a backend failure produces a
    payload carrying a warning instead.
    """
    config = client.config
    if not config.project_id:
        return InitialContext(
            message=WELCOME,
            warning="SANITY_PROJECT_ID is not configured. Please set it in your environment.",
            instructions="Set the following environment variables before using the server:",
            required_variables=list(REQUIRED_VARIABLES),
            note="Once these are set, the server will be ready to use.",
        )

    try:
        releases = await list_releases(client)
    except ContentStackError as exc:
        logger.warning("Could not load releases for initial context: %s", exc)
        return InitialContext(
            message=WELCOME,
            warning="Could not fetch complete initial context.",
            instructions="You can still use the server, but some information may be missing.",
            project_id=config.project_id,
            dataset=config.dataset,
            note="Make sure your SANITY_TOKEN has the necessary permissions.",
        )

    active = [
        summary
        for summary in (ReleaseSummary.from_document(release) for release in releases.releases)
        if summary.state not in INACTIVE_STATES
    ]
    return InitialContext(
        message=WELCOME,
        instructions=(
            "Use the document tools to publish, edit and delete content, the version "
            "tools to stage changes inside a release, and the release tools to manage "
            "a release from creation through publishing."
        ),
        project_id=config.project_id,
        dataset=config.dataset,
        active_releases=active,
        note="Draft documents live under the drafts. prefix; release versions under "
        "versions.<releaseId>.",
    )
