"""Consumer for CMS change events via Redis Streams."""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

import redis.asyncio as aioredis

from revalidation_service.bootstrap import build_dispatcher
from revalidation_service.config import settings
from revalidation_service.infrastructure.bus.change_events import (
    MalformedEventError,
    parse_change_event,
)
from revalidation_service.infrastructure.bus.redis_streams import RedisStreamConsumer
from revalidation_service.infrastructure.http.revalidation_client import RevalidationClient
from revalidation_service.logging_config import configure_logging
from revalidation_service.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class ChangeEventHandler:
    """Stream callback: parse one entry and dispatch it. Outcomes are only logged."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    async def __call__(self, event_type: str, fields: dict[str, Any]) -> None:
        try:
            event = parse_change_event(event_type, fields)
        except MalformedEventError as exc:
            logger.warning("Dropping malformed %s event: %s", event_type, exc)
            return
        if event is None:
            logger.debug("Ignoring unknown event: %s", event_type)
            return

        result = await self._dispatcher.dispatch_event(event)
        if result.config_incomplete:
            logger.warning("Revalidation not configured, %s event skipped (%s)", event_type, result.reason)
        elif result.outcomes:
            logger.info(
                "%s -> %s",
                event_type,
                ", ".join(f"{o.target}={o.status}" for o in result.outcomes),
            )


async def run_consumer() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    client = RevalidationClient(timeout=settings.REVALIDATE_TIMEOUT_SECONDS)
    dispatcher = build_dispatcher(settings, redis, client)
    consumer_name = f"consumer-{uuid.uuid4().hex[:8]}"

    consumer = RedisStreamConsumer(
        redis=redis,
        stream=settings.CMS_EVENTS_STREAM,
        group=settings.CMS_EVENTS_GROUP,
        consumer=consumer_name,
        callback=ChangeEventHandler(dispatcher),
    )
    await consumer.start()
    logger.info("CMS events consumer started (%s)", consumer_name)

    try:
        await consumer.wait()
    except asyncio.CancelledError:
        pass
    finally:
        await consumer.stop()
        await client.aclose()
        await redis.aclose()


def main() -> None:
    configure_logging()
    asyncio.run(run_consumer())


if __name__ == "__main__":
    main()
