from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from revalidation_service.application.dto.principal import Principal
from revalidation_service.application.exceptions import ValidationError
from revalidation_service.application.policies.permissions import assert_admin
from revalidation_service.application.ports.content import RecentContentReader
from revalidation_service.domain.entities.outcome import DispatchResult
from revalidation_service.domain.value_objects.enums import RevalidationAction
from revalidation_service.services.dispatcher import Dispatcher
from revalidation_service.services.slug_mapper import SlugMapper

logger = logging.getLogger(__name__)

DEFAULT_COMMON_SLUGS = ("/", "/blog", "/about")
RECENT_CONTENT_TYPE = "post"

RECENT_CONTENT_UNAVAILABLE = "recent_content_unavailable"


@dataclass(frozen=True, slots=True)
class ManualRevalidation:
    action: RevalidationAction
    message: str
    result: DispatchResult
    warning: str | None = None

    @property
    def ok(self) -> bool:
        return self.result.ok and self.warning is None

    @property
    def reason(self) -> str | None:
        return self.result.reason or self.warning


async def common_page_slugs(
    content: RecentContentReader,
    mapper: SlugMapper,
    *,
    common_slugs: Sequence[str] = DEFAULT_COMMON_SLUGS,
    recent_limit: int = 10,
) -> tuple[list[str], str | None]:
    """Well-known pages plus the routes of the most recently published posts.

    The fixed pages are always returned; when the content lookup fails the
    second element explains what was left out.
    """
    slugs = list(common_slugs)
    if recent_limit <= 0:
        return slugs, None
    try:
        names = await content.recent_published_slugs(RECENT_CONTENT_TYPE, recent_limit)
    except Exception as exc:
        logger.exception("Recent content lookup failed, revalidating fixed pages only")
        return slugs, f"{RECENT_CONTENT_UNAVAILABLE}: {exc}"
    slugs.extend(mapper.slug_for(RECENT_CONTENT_TYPE, name) for name in names if name)
    return slugs, None


async def revalidate(
    action: RevalidationAction,
    slug: str | None,
    principal: Principal,
    dispatcher: Dispatcher,
    content: RecentContentReader,
    mapper: SlugMapper,
    *,
    common_slugs: Sequence[str] = DEFAULT_COMMON_SLUGS,
    recent_limit: int = 10,
) -> ManualRevalidation:
    assert_admin(principal)
    slug = (slug or "").strip()

    if action == RevalidationAction.CLEAR_ALL:
        targets, warning = await common_page_slugs(
            content, mapper, common_slugs=common_slugs, recent_limit=recent_limit,
        )
        logger.info(
            "Admin %s requested batch revalidation of %d page(s)",
            principal.subject_id, len(targets),
        )
        result = await dispatcher.dispatch_batch(targets)
        return ManualRevalidation(action, "Cache clearing initiated", result, warning)

    if not slug:
        raise ValidationError("Slug is required")

    logger.info("Admin %s requested revalidation of %s", principal.subject_id, slug)
    result = await dispatcher.dispatch_batch([slug])
    return ManualRevalidation(action, f"Revalidation triggered for: {slug}", result)
