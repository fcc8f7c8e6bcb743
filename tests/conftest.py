"""Shared test fixtures."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest

from revalidation_service.application.dto.endpoint import EndpointConfig
from revalidation_service.application.dto.principal import Principal
from revalidation_service.domain.entities.outcome import RevalidationOutcome
from revalidation_service.domain.value_objects.enums import PrincipalKind
from revalidation_service.services.config_resolver import ConfigResolver, override_source
from revalidation_service.services.dispatcher import Dispatcher
from revalidation_service.services.slug_mapper import SlugMapper

FRONTEND_URL = "https://frontend.test"
SECRET = "s3cret"

# Scripted status used by FakeNotifier to simulate a connection failure.
TRANSPORT_FAILURE = 0


@pytest.fixture
def user_principal() -> Principal:
    return Principal(kind=PrincipalKind.USER, subject_id=42, roles=[])


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(kind=PrincipalKind.ADMIN, subject_id=1, roles=["admin"])


@dataclass
class FakeConfigStore:
    _values: dict[str, str] = field(default_factory=dict)
    fail: bool = False

    async def get(self, key: str) -> str | None:
        if self.fail:
            raise ConnectionError("store unavailable")
        return self._values.get(key)


@dataclass
class FakeNotifier:
    """Scripted notifier: each target pops its next status code (default 200)."""

    _scripts: dict[str, list[int]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    configs: list[EndpointConfig] = field(default_factory=list)
    hang: set[str] = field(default_factory=set)
    explode: set[str] = field(default_factory=set)
    in_flight: int = 0
    max_in_flight: int = 0

    async def notify(self, target: str, config: EndpointConfig) -> RevalidationOutcome:
        self.calls.append(target)
        self.configs.append(config)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if target in self.hang:
                await asyncio.Event().wait()
            if target in self.explode:
                raise RuntimeError("boom")
            script = self._scripts.get(target)
            code = script.pop(0) if script else 200
        finally:
            self.in_flight -= 1

        if code == TRANSPORT_FAILURE:
            return RevalidationOutcome.transport_error(target, "connection refused")
        if code != 200:
            return RevalidationOutcome.http_error(target, code, "scripted")
        return RevalidationOutcome.success(target)


@dataclass
class FakeContentReader:
    _slugs: list[str] = field(default_factory=list)
    requests: list[tuple[str, int]] = field(default_factory=list)

    async def recent_published_slugs(self, content_type: str, limit: int) -> list[str]:
        self.requests.append((content_type, limit))
        return self._slugs[:limit]


@dataclass
class FailingContentReader:
    error: Exception = field(default_factory=lambda: ConnectionError("cms db unreachable"))
    requests: list[tuple[str, int]] = field(default_factory=list)

    async def recent_published_slugs(self, content_type: str, limit: int) -> list[str]:
        self.requests.append((content_type, limit))
        raise self.error


@dataclass
class FakeSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_resolver(base_url: str | None = FRONTEND_URL, secret: str | None = SECRET) -> ConfigResolver:
    return ConfigResolver([override_source({"base_url": base_url, "secret": secret})])


def make_dispatcher(
    notifier: FakeNotifier | None = None,
    *,
    resolver: ConfigResolver | None = None,
    mapper: SlugMapper | None = None,
    sleep: FakeSleep | None = None,
    **kwargs,
) -> Dispatcher:
    return Dispatcher(
        resolver or make_resolver(),
        notifier or FakeNotifier(),
        mapper or SlugMapper(),
        sleep=sleep or FakeSleep(),
        **kwargs,
    )
