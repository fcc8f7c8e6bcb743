from __future__ import annotations

from pydantic import BaseModel

from revalidation_service.domain.value_objects.enums import OutcomeStatus, RevalidationAction


class RevalidationRequest(BaseModel):
    slug: str | None = None
    action_type: RevalidationAction = RevalidationAction.SINGLE


class OutcomeResponse(BaseModel):
    target: str
    status: OutcomeStatus
    code: int | None = None
    reason: str | None = None
    attempts: int = 0


class RevalidationResponse(BaseModel):
    success: bool
    message: str
    reason: str | None = None
    results: list[OutcomeResponse] = []
