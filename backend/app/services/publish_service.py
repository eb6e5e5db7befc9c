from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ..auth import AdminContext
from ..errors import PageNotFoundError
from ..models import LandingPage
from ..models.landing_page import STATUS_DRAFT, STATUS_PUBLISHED
from .audit_service import (
    PAGE_PUBLISHED,
    PAGE_UNPUBLISHED,
    TARGET_LANDING_PAGE,
    AuditLogService,
    snapshot_page,
)
from .landing_page_service import LandingPageService

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    page: LandingPage
    changed: bool
    action: str | None = None


class PublishService:
    """draft/archived <-> published transitions driven by the publish toggle."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.pages = LandingPageService(db)
        self.audit = AuditLogService(db)

    def toggle(self, page_id: str, publish: bool, actor: AdminContext) -> PublishResult:
        page = self.pages.get_by_id(page_id)
        if page is None:
            raise PageNotFoundError()
        target = STATUS_PUBLISHED if publish else STATUS_DRAFT
        if page.status == target:
            logger.info("publish_toggle_noop id=%s status=%s", page_id, target)
            return PublishResult(page=page, changed=False)

        before = snapshot_page(page)
        self.pages.update(page_id, {"status": target}, actor.uid)
        page = self.pages.get_by_id(page_id)
        action = PAGE_PUBLISHED if publish else PAGE_UNPUBLISHED
        self.audit.log_event(
            action,
            actor.uid,
            TARGET_LANDING_PAGE,
            page_id,
            before=before,
            after=snapshot_page(page),
            ip_address=actor.ip_address,
        )
        return PublishResult(page=page, changed=True, action=action)


__all__ = ["PublishService", "PublishResult"]
