from __future__ import annotations

from typing import Protocol


class ConfigStore(Protocol):
    """Read-only view of the stored (admin-managed) endpoint settings."""

    async def get(self, key: str) -> str | None: ...
