from __future__ import annotations

from typing import Protocol

from revalidation_service.application.dto.endpoint import EndpointConfig
from revalidation_service.domain.entities.outcome import RevalidationOutcome


class Notifier(Protocol):
    async def notify(self, target: str, config: EndpointConfig) -> RevalidationOutcome: ...
