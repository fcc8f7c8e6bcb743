from __future__ import annotations

from typing import Protocol


class RecentContentReader(Protocol):
    async def recent_published_slugs(self, content_type: str, limit: int) -> list[str]: ...
