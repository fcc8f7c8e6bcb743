"""Unit tests for the outbound revalidation client."""
from __future__ import annotations

from typing import Callable

import httpx
import pytest

from revalidation_service.application.dto.endpoint import EndpointConfig
from revalidation_service.domain.value_objects.enums import OutcomeStatus
from revalidation_service.infrastructure.http.revalidation_client import (
    SECRET_HEADER,
    RevalidationClient,
    build_revalidation_url,
)

_CONFIG = EndpointConfig(base_url="https://example.com", secret="s3cret")


def _make_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[RevalidationClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return RevalidationClient(http_client, timeout=5.0), requests


def test_trailing_slash_does_not_double_separator():
    url = build_revalidation_url("https://example.com/", "/blog")

    assert url.path == "/api/revalidate"
    assert "//api" not in str(url)
    assert url.params["slug"] == "/blog"


def test_blank_target_is_a_programming_error():
    with pytest.raises(ValueError):
        build_revalidation_url("https://example.com", "  ")


@pytest.mark.asyncio
async def test_success_sends_get_with_secret_header():
    client, requests = _make_client(lambda _req: httpx.Response(200, json={"revalidated": True}))

    outcome = await client.notify("/blog/my-post", _CONFIG)

    assert outcome.status == OutcomeStatus.SUCCESS
    assert outcome.ok
    [request] = requests
    assert request.method == "GET"
    assert request.url.host == "example.com"
    assert request.url.path == "/api/revalidate"
    assert request.url.params["slug"] == "/blog/my-post"
    assert request.headers[SECRET_HEADER] == "s3cret"


@pytest.mark.asyncio
async def test_base_url_with_path_prefix_is_kept():
    client, requests = _make_client(lambda _req: httpx.Response(200))
    config = EndpointConfig(base_url="https://example.com/site/", secret="s3cret")

    await client.notify("/", config)

    assert requests[0].url.path == "/site/api/revalidate"


@pytest.mark.asyncio
async def test_server_error_carries_code_and_message():
    client, _ = _make_client(lambda _req: httpx.Response(500, json={"message": "Error revalidating"}))

    outcome = await client.notify("/", _CONFIG)

    assert outcome.status == OutcomeStatus.HTTP_ERROR
    assert outcome.code == 500
    assert outcome.reason == "Error revalidating"
    assert outcome.retryable


@pytest.mark.asyncio
async def test_rejected_secret_falls_back_to_reason_phrase():
    client, _ = _make_client(lambda _req: httpx.Response(401))

    outcome = await client.notify("/", _CONFIG)

    assert outcome.status == OutcomeStatus.HTTP_ERROR
    assert outcome.code == 401
    assert outcome.reason == "Unauthorized"
    assert not outcome.retryable


@pytest.mark.asyncio
async def test_non_200_success_codes_are_failures():
    client, _ = _make_client(lambda _req: httpx.Response(204))

    outcome = await client.notify("/", _CONFIG)

    assert outcome.status == OutcomeStatus.HTTP_ERROR
    assert outcome.code == 204


@pytest.mark.asyncio
async def test_connection_failure_is_transport_error():
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _make_client(_refuse)

    outcome = await client.notify("/", _CONFIG)

    assert outcome.status == OutcomeStatus.TRANSPORT_ERROR
    assert outcome.reason == "connection refused"


@pytest.mark.asyncio
async def test_timeout_is_transport_error():
    def _slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client, _ = _make_client(_slow)

    outcome = await client.notify("/", _CONFIG)

    assert outcome.status == OutcomeStatus.TRANSPORT_ERROR
    assert outcome.reason == "timeout"


@pytest.mark.asyncio
async def test_incomplete_config_makes_no_request():
    client, requests = _make_client(lambda _req: httpx.Response(200))

    outcome = await client.notify("/", EndpointConfig(base_url="https://example.com"))

    assert outcome.status == OutcomeStatus.SKIPPED
    assert requests == []
