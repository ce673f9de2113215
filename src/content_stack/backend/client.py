"""Async HTTP client for the structured-content backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
import pydantic

from content_stack.backend.transaction import Transaction, Visibility
from content_stack.errors import BackendError
from content_stack.models.results import ActionResult, MutationResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from content_stack.config import SanityConfig
    from content_stack.models.actions import Action

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=pydantic.BaseModel)


class SanityClient:
    """Wraps the query, mutate and actions endpoints of one project dataset.

    The client carries its immutable ``SanityConfig``; every operation reads
    project, dataset and API version from it rather than from process state.
    """

    def __init__(
        self,
        config: SanityConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def config(self) -> SanityConfig:
        return self._config

    async def initialize(self) -> None:
        """Open the underlying HTTP connection pool."""
        headers = {"Accept": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=headers,
            timeout=self._config.timeout,
            transport=self._transport,
        )
        logger.info(
            "Backend client initialized: project=%s dataset=%s api_version=%s",
            self._config.project_id,
            self._config.dataset,
            self._config.api_version,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> SanityClient:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            raise RuntimeError("SanityClient not initialized; call initialize() first")
        return self._http

    async def fetch(
        self,
        query: str,
        params: Mapping[str, Any] | None = None,
        *,
        perspective: str | None = None,
    ) -> Any:
        """Run a read-only query and return its ``result``."""
        body: dict[str, Any] = {"query": query}
        if params:
            body["params"] = dict(params)
        url_params = {"perspective": perspective} if perspective else None
        payload = await self._request(
            "POST", f"/data/query/{self._config.dataset}", json=body, params=url_params
        )
        return payload.get("result")

    async def get_document(self, document_id: str) -> dict[str, Any] | None:
        """Fetch one document by exact ID, or None when it does not exist."""
        payload = await self._request("GET", f"/data/doc/{self._config.dataset}/{document_id}")
        documents = payload.get("documents") or []
        return documents[0] if documents else None

    async def mutate(
        self,
        mutations: Sequence[Mapping[str, Any]],
        *,
        visibility: Visibility = Visibility.SYNC,
    ) -> MutationResult:
        """Apply mutations atomically and return the per-mutation results."""
        payload = await self._request(
            "POST",
            f"/data/mutate/{self._config.dataset}",
            json={"mutations": [dict(mutation) for mutation in mutations]},
            params={"returnIds": "true", "visibility": visibility.value},
        )
        result = _parse(MutationResult, payload, "mutate")
        if result.document_id is None and result.results:
            result.document_id = result.results[0].id
        return result

    async def perform_actions(self, actions: Sequence[Action]) -> ActionResult:
        """Submit actions in one Actions API call."""
        payload = await self._request(
            "POST",
            f"/data/actions/{self._config.dataset}",
            json={"actions": [action.to_payload() for action in actions]},
        )
        logger.debug("Performed %d action(s)", len(actions))
        return _parse(ActionResult, payload, "actions")

    def transaction(self) -> Transaction:
        """Start a new, empty transaction bound to this client."""
        return Transaction(self)

    async def create(self, document: Mapping[str, Any]) -> MutationResult:
        return await self.mutate([{"create": dict(document)}])

    async def create_or_replace(self, document: Mapping[str, Any]) -> MutationResult:
        return await self.transaction().create_or_replace(document).commit()

    async def create_if_not_exists(self, document: Mapping[str, Any]) -> MutationResult:
        return await self.transaction().create_if_not_exists(document).commit()

    async def delete(
        self, document_id: str, *, visibility: Visibility = Visibility.SYNC
    ) -> MutationResult:
        return await self.mutate([{"delete": {"id": document_id}}], visibility=visibility)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self.http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BackendError(
                _error_message(exc.response),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"Request to {path} failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise BackendError(
                f"Invalid response from {path}: expected JSON, got {_snippet(response.text)}",
            ) from exc
        if not isinstance(payload, dict):
            raise BackendError(f"Invalid response from {path}: expected a JSON object")
        return payload


def _parse(model: type[M], payload: dict[str, Any], endpoint: str) -> M:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise BackendError(
            f"Invalid response from {endpoint}: {exc.error_count()} invalid field(s)"
        ) from exc


def _snippet(text: str, limit: int = 80) -> str:
    text = " ".join(text.split())
    return repr(text if len(text) <= limit else f"{text[:limit]}...")


def _error_message(response: httpx.Response) -> str:
    """Extract a readable message from a backend error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if not isinstance(body, dict):
        return f"HTTP {response.status_code}"
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("description") or error.get("message") or error)
    if body.get("message"):
        return str(body["message"])
    if isinstance(error, str):
        return error
    return f"HTTP {response.status_code}"
