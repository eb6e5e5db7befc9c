from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow

ROLE_ADMIN = "admin"
ROLE_SUPERADMIN = "superadmin"

PERMISSION_KEYS = (
    "create_pages",
    "edit_pages",
    "delete_pages",
    "publish_pages",
    "view_analytics",
)


def default_permissions() -> Dict[str, bool]:
    return {key: True for key in PERMISSION_KEYS}


class Admin(Base):
    __tablename__ = "admins"

    # identity-provider subject (uid)
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=ROLE_ADMIN)
    permissions: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=default_permissions)
    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    def can(self, permission: str) -> bool:
        if self.role == ROLE_SUPERADMIN:
            return True
        return bool((self.permissions or {}).get(permission))
