from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import SlugTakenError
from ..models import LandingPage
from ..models.base import utcnow
from ..models.landing_page import STATUS_DRAFT, STATUS_PUBLISHED

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "slug",
        "description",
        "meta_title",
        "meta_description",
        "canonical_url",
        "og_title",
        "og_description",
        "og_image",
        "twitter_card",
        "business_name",
        "business_category",
        "business_phone",
        "business_email",
        "business_website",
        "business_location",
        "html_content",
        "status",
    }
)


# public paths served by the site itself
RESERVED_SLUGS = frozenset(
    {"admin", "api", "static", "about", "plans", "privacy", "terms", "health"}
)


def _editable(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k in EDITABLE_FIELDS}


class LandingPageService:
    """Typed access to the ``landing_pages`` table.

    No locking: two concurrent updates of one page resolve last-writer-wins,
    and slug uniqueness is a read-then-write check backed by the unique
    index on ``slug``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_pages(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[LandingPage]:
        stmt = select(LandingPage)
        if status:
            stmt = stmt.where(LandingPage.status == status)
        if category:
            stmt = stmt.where(LandingPage.business_category == category)
        stmt = stmt.order_by(LandingPage.updated_at.desc(), LandingPage.id.asc())
        pages = list(self.db.execute(stmt).scalars().all())
        if search:
            needle = search.lower()
            pages = [
                p
                for p in pages
                if needle in (p.title or "").lower()
                or needle in (p.slug or "").lower()
                or needle in (p.business_name or "").lower()
            ]
        return pages

    def get_by_id(self, page_id: str) -> Optional[LandingPage]:
        return self.db.get(LandingPage, page_id)

    def get_by_slug(self, slug: str) -> Optional[LandingPage]:
        return self.db.execute(
            select(LandingPage).where(LandingPage.slug == slug).limit(1)
        ).scalar_one_or_none()

    def is_slug_taken(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        if slug in RESERVED_SLUGS:
            return True
        owner_id = self.db.execute(
            select(LandingPage.id).where(LandingPage.slug == slug).limit(1)
        ).scalar_one_or_none()
        if owner_id is None:
            return False
        if exclude_id:
            return owner_id != exclude_id
        return True

    def create(self, data: Dict[str, Any], actor_id: str) -> str:
        now = utcnow()
        fields = _editable(data)
        status = fields.get("status") or STATUS_DRAFT
        fields["status"] = status
        if not fields.get("title"):
            fields["title"] = fields.get("business_name", "")
        page = LandingPage(
            **fields,
            created_at=now,
            updated_at=now,
            created_by=actor_id,
            updated_by=actor_id,
            is_published=status == STATUS_PUBLISHED,
            published_at=now if status == STATUS_PUBLISHED else None,
            view_count=0,
            last_viewed_at=None,
        )
        self.db.add(page)
        self._commit_or_slug_conflict()
        logger.info("page_created id=%s slug=%s status=%s by=%s", page.id, page.slug, status, actor_id)
        return page.id

    def update(self, page_id: str, data: Dict[str, Any], actor_id: str) -> bool:
        page = self.get_by_id(page_id)
        if page is None:
            return False
        now = utcnow()
        fields = _editable(data)
        was_published = page.status == STATUS_PUBLISHED
        for key, value in fields.items():
            setattr(page, key, value)
        if not page.title:
            page.title = page.business_name
        is_published = page.status == STATUS_PUBLISHED
        if is_published and not was_published:
            page.published_at = now
        elif was_published and not is_published:
            page.published_at = None
        page.is_published = is_published
        page.updated_at = now
        page.updated_by = actor_id
        self._commit_or_slug_conflict()
        logger.info("page_updated id=%s status=%s by=%s", page.id, page.status, actor_id)
        return True

    def delete(self, page_id: str) -> bool:
        page = self.get_by_id(page_id)
        if page is None:
            return False
        slug = page.slug
        self.db.delete(page)
        self.db.commit()
        logger.info("page_deleted id=%s slug=%s", page_id, slug)
        return True

    def list_published(self) -> List[LandingPage]:
        stmt = (
            select(LandingPage)
            .where(LandingPage.status == STATUS_PUBLISHED)
            .order_by(LandingPage.published_at.desc(), LandingPage.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def increment_view_count(self, page_id: str) -> None:
        try:
            self.db.execute(
                update(LandingPage)
                .where(LandingPage.id == page_id)
                .values(view_count=LandingPage.view_count + 1, last_viewed_at=utcnow())
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("view_count_increment_failed id=%s err=%s", page_id, exc)

    def _commit_or_slug_conflict(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("slug_conflict_on_write err=%s", exc.orig)
            raise SlugTakenError() from exc


__all__ = ["LandingPageService", "EDITABLE_FIELDS", "RESERVED_SLUGS"]
