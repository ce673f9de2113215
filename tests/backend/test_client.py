"""Tests for the backend HTTP client against a mock transport."""

from __future__ import annotations

import json

import httpx
import pytest

from content_stack.backend.client import SanityClient
from content_stack.backend.transaction import Visibility
from content_stack.config import SanityConfig
from content_stack.errors import BackendError
from content_stack.models.actions import PublishAction


def _config() -> SanityConfig:
    return SanityConfig(
        project_id="proj", dataset="production", api_version="2025-02-19", token="secret"
    )


class TestSanityClient:
    """Test request shaping and response handling."""

    @pytest.fixture
    def requests(self) -> list[httpx.Request]:
        return []

    def _client(self, requests: list[httpx.Request], response: httpx.Response) -> SanityClient:
        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return response

        return SanityClient(_config(), transport=httpx.MockTransport(handler))

    async def test_http_requires_initialize(self) -> None:
        client = SanityClient(_config())

        with pytest.raises(RuntimeError, match="not initialized"):
            _ = client.http

    async def test_fetch_posts_query_with_perspective(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(requests, httpx.Response(200, json={"result": [{"_id": "a"}]}))

        async with client:
            result = await client.fetch("*[_id == $id]", {"id": "a"}, perspective="raw")

        assert result == [{"_id": "a"}]
        request = requests[0]
        assert request.method == "POST"
        assert request.url.host == "proj.api.sanity.io"
        assert request.url.path == "/v2025-02-19/data/query/production"
        assert request.url.params["perspective"] == "raw"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {"query": "*[_id == $id]", "params": {"id": "a"}}

    async def test_mutate_sends_visibility_and_parses_ids(
        self, requests: list[httpx.Request]
    ) -> None:
        body = {
            "transactionId": "tx-1",
            "results": [{"id": "a", "operation": "delete"}, {"id": "drafts.a"}],
        }
        client = self._client(requests, httpx.Response(200, json=body))

        async with client:
            result = await client.mutate(
                [{"delete": {"id": "a"}}, {"delete": {"id": "drafts.a"}}],
                visibility=Visibility.ASYNC,
            )

        assert result.transaction_id == "tx-1"
        assert result.ids == ["a", "drafts.a"]
        assert result.document_id == "a"
        params = requests[0].url.params
        assert params["returnIds"] == "true"
        assert params["visibility"] == "async"

    async def test_perform_actions_serializes_payloads(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(requests, httpx.Response(200, json={"transactionId": "tx-2"}))

        async with client:
            result = await client.perform_actions(
                [PublishAction(draft_id="drafts.a", published_id="a")]
            )

        assert result.transaction_id == "tx-2"
        assert requests[0].url.path == "/v2025-02-19/data/actions/production"
        assert json.loads(requests[0].content) == {
            "actions": [
                {
                    "actionType": "sanity.action.document.publish",
                    "draftId": "drafts.a",
                    "publishedId": "a",
                }
            ]
        }

    async def test_get_document_returns_none_when_missing(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(requests, httpx.Response(200, json={"documents": []}))

        async with client:
            assert await client.get_document("missing") is None

        assert requests[0].url.path == "/v2025-02-19/data/doc/production/missing"

    async def test_http_error_becomes_backend_error(
        self, requests: list[httpx.Request]
    ) -> None:
        response = httpx.Response(
            403, json={"error": {"description": "Not authorized to perform action"}}
        )
        client = self._client(requests, response)

        async with client:
            with pytest.raises(BackendError) as exc_info:
                await client.fetch("*")

        assert exc_info.value.status_code == 403  # noqa: PLR2004
        assert exc_info.value.is_auth_failure is True
        assert str(exc_info.value) == "Not authorized to perform action"

    async def test_transport_error_becomes_backend_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        client = SanityClient(_config(), transport=httpx.MockTransport(handler))

        async with client:
            with pytest.raises(BackendError, match="boom"):
                await client.fetch("*")

    async def test_create_or_replace_goes_through_transaction(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(
            requests, httpx.Response(200, json={"results": [{"id": "drafts.a"}]})
        )

        async with client:
            await client.create_or_replace({"_id": "drafts.a", "_type": "post"})

        assert json.loads(requests[0].content) == {
            "mutations": [{"createOrReplace": {"_id": "drafts.a", "_type": "post"}}]
        }

    async def test_non_json_reply_becomes_backend_error(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(requests, httpx.Response(200, text="<html>gateway</html>"))

        async with client:
            with pytest.raises(BackendError, match="Invalid response from /data/query/production"):
                await client.fetch("*")

    async def test_non_object_reply_becomes_backend_error(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(requests, httpx.Response(200, json=["unexpected"]))

        async with client:
            with pytest.raises(BackendError, match="expected a JSON object"):
                await client.fetch("*")

    async def test_malformed_mutation_reply_becomes_backend_error(
        self, requests: list[httpx.Request]
    ) -> None:
        client = self._client(requests, httpx.Response(200, json={"results": "oops"}))

        async with client:
            with pytest.raises(BackendError, match="Invalid response from mutate"):
                await client.delete("a")
