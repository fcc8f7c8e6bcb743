from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from revalidation_service.infrastructure.db.base import Base


class PostModel(Base):
    """Read-only mapping of the columns we need from the CMS posts table."""

    __tablename__ = "wp_posts"

    id: Mapped[int] = mapped_column("ID", BigInteger, primary_key=True)
    post_name: Mapped[str] = mapped_column(String(200), nullable=False)
    post_type: Mapped[str] = mapped_column(String(20), nullable=False)
    post_status: Mapped[str] = mapped_column(String(20), nullable=False)
    post_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("type_status_date", "post_type", "post_status", "post_date", "ID"),
    )
