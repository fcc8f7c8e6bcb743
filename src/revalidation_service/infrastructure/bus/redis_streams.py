"""Redis Streams consumer for CMS change events."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)

OnStreamEventCallback = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]

RETRY_DELAY_SECONDS = 5


class RedisStreamConsumer:
    """XREADGROUP-based consumer for a single stream + consumer group.

    Entries left pending by a consumer that died mid-batch are claimed once
    they have been idle for ``claim_idle_ms`` and processed again.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        stream: str,
        group: str,
        consumer: str,
        callback: OnStreamEventCallback,
        *,
        batch_size: int = 10,
        block_ms: int = 5000,
        claim_idle_ms: int = 60_000,
    ) -> None:
        self._redis = redis
        self._stream = stream
        self._group = group
        self._consumer = consumer
        self._callback = callback
        self._batch_size = batch_size
        self._block_ms = block_ms
        self._claim_idle_ms = claim_idle_ms
        self._task: asyncio.Task[None] | None = None

    async def ensure_group(self) -> None:
        try:
            await self._redis.xgroup_create(
                self._stream, self._group, id="$", mkstream=True
            )
            logger.info("Created consumer group %s on %s", self._group, self._stream)
        except aioredis.ResponseError as e:
            if "BUSYGROUP" in str(e):
                logger.debug("Consumer group %s already exists", self._group)
            else:
                raise

    async def start(self) -> None:
        await self.ensure_group()
        self._task = asyncio.create_task(self._consume(), name="cms-events-consumer")
        logger.info(
            "Stream consumer started: stream=%s group=%s consumer=%s",
            self._stream, self._group, self._consumer,
        )

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Stream consumer stopped")

    async def wait(self) -> None:
        if self._task:
            await self._task

    async def claim_stale(self) -> int:
        """Process entries another consumer read but never acknowledged."""
        _next_id, messages, *_ = await self._redis.xautoclaim(
            self._stream,
            self._group,
            self._consumer,
            min_idle_time=self._claim_idle_ms,
            start_id="0-0",
            count=self._batch_size,
        )
        for msg_id, fields in messages:
            await self._handle(msg_id, fields)
        if messages:
            logger.info("Reclaimed %d stale stream entries", len(messages))
        return len(messages)

    async def _consume(self) -> None:
        while True:
            try:
                await self.claim_stale()
                entries = await self._redis.xreadgroup(
                    groupname=self._group,
                    consumername=self._consumer,
                    streams={self._stream: ">"},
                    count=self._batch_size,
                    block=self._block_ms,
                )
                for _stream_name, messages in entries or []:
                    for msg_id, fields in messages:
                        await self._handle(msg_id, fields)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Stream consumer error, retrying in %ds", RETRY_DELAY_SECONDS)
                await asyncio.sleep(RETRY_DELAY_SECONDS)

    async def _handle(self, msg_id: str, fields: dict[str, Any] | None) -> None:
        if fields is None:
            # Trimmed from the stream while pending; nothing left to process.
            logger.warning("Stream message %s has no payload, acknowledging", msg_id)
            await self._redis.xack(self._stream, self._group, msg_id)
            return
        event_type = fields.get("event_type", "unknown")
        try:
            await self._callback(event_type, fields)
        except Exception:
            # Left unacked so a later claim_stale() retries it.
            logger.exception("Error processing stream message %s (%s)", msg_id, event_type)
            return
        await self._redis.xack(self._stream, self._group, msg_id)
