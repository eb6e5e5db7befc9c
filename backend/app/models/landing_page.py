from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
STATUS_ARCHIVED = "archived"
PAGE_STATUSES = (STATUS_DRAFT, STATUS_PUBLISHED, STATUS_ARCHIVED)


def _new_id() -> str:
    return uuid.uuid4().hex


class LandingPage(Base):
    __tablename__ = "landing_pages"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    meta_title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    meta_description: Mapped[str] = mapped_column(String(160), nullable=False, default="")
    canonical_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    og_title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    og_description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    og_image: Mapped[str] = mapped_column(Text, nullable=False, default="")
    twitter_card: Mapped[str] = mapped_column(String(32), nullable=False, default="summary_large_image")

    business_name: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    business_category: Mapped[str] = mapped_column(String(500), nullable=False, default="", index=True)
    business_phone: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    business_email: Mapped[str] = mapped_column(Text, nullable=False, default="")
    business_website: Mapped[str] = mapped_column(Text, nullable=False, default="")
    business_location: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    html_content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_DRAFT, index=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False, index=True)
    updated_by: Mapped[str] = mapped_column(String(128), nullable=False)

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_viewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
