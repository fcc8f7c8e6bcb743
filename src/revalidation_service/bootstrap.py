"""Construction of the dispatch engine from settings, shared by API and workers."""
from __future__ import annotations

import redis.asyncio as aioredis

from revalidation_service.application.ports.notifier import Notifier
from revalidation_service.config import Settings
from revalidation_service.infrastructure.config.redis_store import RedisConfigStore
from revalidation_service.services.config_resolver import build_resolver
from revalidation_service.services.dispatcher import Dispatcher
from revalidation_service.services.slug_mapper import SlugMapper


def build_mapper(settings: Settings) -> SlugMapper:
    return SlugMapper(settings.ROUTE_PREFIXES, listing_slug=settings.LISTING_SLUG)


def build_dispatcher(
    settings: Settings,
    redis: aioredis.Redis,
    notifier: Notifier,
) -> Dispatcher:
    store = RedisConfigStore(redis, settings.REVALIDATION_SETTINGS_KEY)
    return Dispatcher(
        build_resolver(settings, store),
        notifier,
        build_mapper(settings),
        concurrency=settings.REVALIDATE_CONCURRENCY,
        max_attempts=settings.REVALIDATE_MAX_ATTEMPTS,
        backoff_base=settings.REVALIDATE_BACKOFF_SECONDS,
        backoff_max=settings.REVALIDATE_BACKOFF_MAX_SECONDS,
        default_deadline=settings.REVALIDATE_BATCH_DEADLINE_SECONDS,
    )
