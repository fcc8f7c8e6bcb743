from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from revalidation_service.domain.value_objects.enums import PostStatus
from revalidation_service.infrastructure.db.models.post import PostModel


class RecentPostReaderRepo:
    """Implements application.ports.content.RecentContentReader."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def recent_published_slugs(self, content_type: str, limit: int) -> list[str]:
        stmt = (
            select(PostModel.post_name)
            .where(
                PostModel.post_type == content_type,
                PostModel.post_status == PostStatus.PUBLISH,
                PostModel.post_name != "",
            )
            .order_by(PostModel.post_date.desc(), PostModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
