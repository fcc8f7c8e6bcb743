"""One-time script: create the Redis Streams consumer group for CMS events."""
from __future__ import annotations

import asyncio
import logging

import redis.asyncio as aioredis

from revalidation_service.config import settings

logger = logging.getLogger(__name__)


async def create_group(stream: str, group: str) -> bool:
    """Return True when the group was created, False when it already existed."""
    r = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        await r.xgroup_create(stream, group, id="$", mkstream=True)
    except aioredis.ResponseError as e:
        if "BUSYGROUP" not in str(e):
            raise
        logger.info("Consumer group '%s' already exists on '%s'", group, stream)
        return False
    finally:
        await r.aclose()
    logger.info("Created consumer group '%s' on stream '%s'", group, stream)
    return True


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_group(settings.CMS_EVENTS_STREAM, settings.CMS_EVENTS_GROUP))


if __name__ == "__main__":
    main()
