from __future__ import annotations

from fastapi import APIRouter

from revalidation_service.api.deps import ContentReaderDep, CurrentAdmin, DispatcherDep, MapperDep
from revalidation_service.api.v1.schemas.revalidation import (
    OutcomeResponse,
    RevalidationRequest,
    RevalidationResponse,
)
from revalidation_service.config import settings
from revalidation_service.services import manual_service

router = APIRouter(prefix="/api/v1/revalidation", tags=["revalidation"])


@router.post("", response_model=RevalidationResponse)
async def revalidate(
    body: RevalidationRequest,
    admin: CurrentAdmin,
    dispatcher: DispatcherDep,
    content: ContentReaderDep,
    mapper: MapperDep,
) -> RevalidationResponse:
    manual = await manual_service.revalidate(
        body.action_type,
        body.slug,
        admin,
        dispatcher,
        content,
        mapper,
        common_slugs=settings.COMMON_SLUGS,
        recent_limit=settings.RECENT_POSTS_LIMIT,
    )
    result = manual.result
    return RevalidationResponse(
        success=manual.ok,
        message=manual.message,
        reason=manual.reason,
        results=[OutcomeResponse.model_validate(o, from_attributes=True) for o in result.outcomes],
    )
