from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import AuditLog, LandingPage

logger = logging.getLogger(__name__)

PAGE_CREATED = "page_created"
PAGE_UPDATED = "page_updated"
PAGE_DELETED = "page_deleted"
PAGE_PUBLISHED = "page_published"
PAGE_UNPUBLISHED = "page_unpublished"
ADMIN_LOGIN = "admin_login"

TARGET_LANDING_PAGE = "landingPage"
TARGET_ADMIN = "admin"


def snapshot_page(page: Optional[LandingPage]) -> Optional[Dict[str, Any]]:
    if page is None:
        return None
    data: Dict[str, Any] = {}
    for column in LandingPage.__table__.columns:
        value = getattr(page, column.key)
        data[column.key] = value.isoformat() if isinstance(value, datetime) else value
    return data


class AuditLogService:
    """Append-only audit trail.

    Entries are committed in their own transaction after the primary write.
    A failed write is rolled back and logged; callers never see it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def log_event(
        self,
        action: str,
        admin_id: str,
        target_type: str,
        target_id: str,
        before: Optional[Dict[str, Any]] = None,
        after: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> Optional[AuditLog]:
        changes = None
        if before is not None or after is not None:
            changes = {"before": before, "after": after}
        entry = AuditLog(
            action=action,
            admin_id=admin_id,
            target_type=target_type,
            target_id=target_id,
            changes=changes,
            ip_address=ip_address,
        )
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "audit_write_failed action=%s admin=%s target=%s:%s", action, admin_id, target_type, target_id
            )
            return None
        return entry

    def entries_for(self, target_id: str, action: Optional[str] = None):
        stmt = select(AuditLog).where(AuditLog.target_id == target_id)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        return list(self.db.execute(stmt.order_by(AuditLog.id.asc())).scalars().all())


__all__ = [
    "AuditLogService",
    "snapshot_page",
    "PAGE_CREATED",
    "PAGE_UPDATED",
    "PAGE_DELETED",
    "PAGE_PUBLISHED",
    "PAGE_UNPUBLISHED",
    "ADMIN_LOGIN",
]
