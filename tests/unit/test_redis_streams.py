from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from revalidation_service.infrastructure.bus.redis_streams import RedisStreamConsumer


@dataclass
class FakeStreamRedis:
    stale: list[tuple[str, dict[str, Any] | None]] = field(default_factory=list)
    acked: list[str] = field(default_factory=list)

    async def xautoclaim(self, name, groupname, consumername, min_idle_time, start_id="0-0", count=None):
        claimed, self.stale = self.stale, []
        return ["0-0", claimed, []]

    async def xack(self, name, groupname, *ids):
        self.acked.extend(ids)
        return len(ids)


def _consumer(redis: FakeStreamRedis, callback) -> RedisStreamConsumer:
    return RedisStreamConsumer(
        redis=redis,  # type: ignore[arg-type]
        stream="cms.events",
        group="revalidation-service",
        consumer="test",
        callback=callback,
    )


@pytest.mark.asyncio
async def test_stale_entries_are_processed_and_acked():
    seen: list[str] = []

    async def _callback(event_type: str, fields: dict[str, Any]) -> None:
        seen.append(event_type)

    redis = FakeStreamRedis(stale=[("1-0", {"event_type": "taxonomy.edited", "term_id": "1"})])

    claimed = await _consumer(redis, _callback).claim_stale()

    assert claimed == 1
    assert seen == ["taxonomy.edited"]
    assert redis.acked == ["1-0"]


@pytest.mark.asyncio
async def test_failed_entries_stay_pending():
    async def _callback(event_type: str, fields: dict[str, Any]) -> None:
        raise RuntimeError("dispatch crashed")

    redis = FakeStreamRedis(stale=[("2-0", {"event_type": "post.transition"})])

    await _consumer(redis, _callback).claim_stale()

    assert redis.acked == []


@pytest.mark.asyncio
async def test_trimmed_entries_are_acked_without_callback():
    seen: list[str] = []

    async def _callback(event_type: str, fields: dict[str, Any]) -> None:
        seen.append(event_type)

    redis = FakeStreamRedis(
        stale=[("3-0", None), ("4-0", {"event_type": "taxonomy.created", "term_id": "2"})]
    )

    claimed = await _consumer(redis, _callback).claim_stale()

    assert claimed == 2
    assert seen == ["taxonomy.created"]
    assert redis.acked == ["3-0", "4-0"]
