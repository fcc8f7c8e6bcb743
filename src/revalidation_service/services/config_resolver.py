"""Endpoint configuration lookup with deployment overrides ahead of stored settings."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Mapping, Sequence

from revalidation_service.application.dto.endpoint import EndpointConfig
from revalidation_service.application.ports.config_store import ConfigStore
from revalidation_service.config import Settings

logger = logging.getLogger(__name__)

BASE_URL = "base_url"
SECRET = "secret"

ConfigSource = Callable[[str], Awaitable[str | None]]


def override_source(values: Mapping[str, str | None]) -> ConfigSource:
    """Source backed by fixed deployment values (env vars or constants)."""

    async def _lookup(key: str) -> str | None:
        return values.get(key)

    return _lookup


def settings_override_source(settings: Settings) -> ConfigSource:
    return override_source(
        {
            BASE_URL: settings.NEXTJS_FRONTEND_URL,
            SECRET: settings.NEXTJS_REVALIDATION_SECRET,
        }
    )


def store_source(store: ConfigStore) -> ConfigSource:
    return store.get


class ConfigResolver:
    """Resolve each key independently: first source with a non-empty value wins."""

    def __init__(self, sources: Sequence[ConfigSource]) -> None:
        self._sources = tuple(sources)

    async def resolve(self) -> EndpointConfig:
        return EndpointConfig(
            base_url=await self._lookup(BASE_URL),
            secret=await self._lookup(SECRET),
        )

    async def _lookup(self, key: str) -> str | None:
        for source in self._sources:
            try:
                value = await source(key)
            except Exception:
                logger.exception("Config source failed for key %s, treating as absent", key)
                continue
            if value is not None:
                value = value.strip()
            if value:
                return value
        return None


def build_resolver(settings: Settings, store: ConfigStore | None = None) -> ConfigResolver:
    sources: list[ConfigSource] = [settings_override_source(settings)]
    if store is not None:
        sources.append(store_source(store))
    return ConfigResolver(sources)
