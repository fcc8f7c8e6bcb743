"""Outbound revalidation call to the frontend's ``/api/revalidate`` route."""
from __future__ import annotations

import logging

import httpx

from revalidation_service.application.dto.endpoint import EndpointConfig
from revalidation_service.domain.entities.outcome import RevalidationOutcome

logger = logging.getLogger(__name__)

REVALIDATE_PATH = "/api/revalidate"
# Shared with the frontend route handler; change both sides together.
SECRET_HEADER = "x-vercel-revalidation-secret"
DEFAULT_TIMEOUT_SECONDS = 10.0
_MAX_DIAGNOSTIC_CHARS = 200


def build_revalidation_url(base_url: str, target: str) -> httpx.URL:
    if not target or not target.strip():
        raise ValueError("Revalidation target must be a non-empty slug")
    return httpx.URL(base_url.rstrip("/") + REVALIDATE_PATH, params={"slug": target})


def _diagnostic(response: httpx.Response) -> str:
    message: str | None = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        message = body["message"]
    return (message or response.reason_phrase or f"HTTP {response.status_code}")[:_MAX_DIAGNOSTIC_CHARS]


class RevalidationClient:
    """Implements application.ports.notifier.Notifier.

    Network and HTTP failures come back as outcomes; only a malformed
    target raises.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._timeout = timeout

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def notify(self, target: str, config: EndpointConfig) -> RevalidationOutcome:
        if not config.base_url or not config.secret:
            return RevalidationOutcome.skipped(target, config.problem() or "config_incomplete")

        url = build_revalidation_url(config.base_url, target)
        try:
            response = await self._client.get(
                url,
                headers={SECRET_HEADER: config.secret},
                timeout=self._timeout,
            )
        except httpx.TimeoutException:
            logger.warning("Revalidation of %s timed out after %.1fs", target, self._timeout)
            return RevalidationOutcome.transport_error(target, "timeout")
        except httpx.HTTPError as exc:
            logger.warning("Revalidation of %s failed: %s", target, exc)
            return RevalidationOutcome.transport_error(target, str(exc) or type(exc).__name__)

        if response.status_code != 200:
            return RevalidationOutcome.http_error(target, response.status_code, _diagnostic(response))

        logger.debug("Revalidated %s", target)
        return RevalidationOutcome.success(target)
