from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .errors import NotAuthenticatedError, PermissionDeniedError
from .integrations.identity import IdentityClient
from .models import Admin
from .models.admin import ROLE_SUPERADMIN
from .services.auth_service import AuthService


@dataclass(frozen=True)
class AdminContext:
    """Who is acting on this request; passed explicitly into handlers and services."""

    uid: str
    email: str
    display_name: str
    role: str
    permissions: Dict[str, bool] = field(default_factory=dict)
    ip_address: Optional[str] = None

    def can(self, permission: str) -> bool:
        return self.role == ROLE_SUPERADMIN or bool(self.permissions.get(permission))

    def profile(self) -> dict:
        return {"uid": self.uid, "email": self.email, "displayName": self.display_name}

    @classmethod
    def from_admin(cls, admin: Admin, ip_address: Optional[str] = None) -> "AdminContext":
        return cls(
            uid=admin.id,
            email=admin.email,
            display_name=admin.display_name or "",
            role=admin.role,
            permissions=dict(admin.permissions or {}),
            ip_address=ip_address,
        )


@lru_cache(maxsize=1)
def get_identity_client() -> IdentityClient:
    return IdentityClient(
        api_key=settings.IDENTITY_API_KEY,
        base_url=settings.IDENTITY_BASE_URL,
        timeout=settings.IDENTITY_TIMEOUT_SECONDS,
    )


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for") if settings.TRUST_PROXY_HEADERS else None
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def get_auth_service(
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
) -> AuthService:
    return AuthService(db, identity)


def get_admin_context(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> AdminContext | None:
    admin = auth.session_admin(request.session)
    if admin is None:
        request.state.admin = None
        return None
    ctx = AdminContext.from_admin(admin, ip_address=client_ip(request))
    request.state.admin = ctx
    return ctx


def require_admin(ctx: AdminContext | None = Depends(get_admin_context)) -> AdminContext:
    if ctx is None:
        raise NotAuthenticatedError()
    return ctx


def require_permission(permission: str):
    def dependency(ctx: AdminContext = Depends(require_admin)) -> AdminContext:
        if not ctx.can(permission):
            raise PermissionDeniedError(f"Forbidden: missing permission {permission}")
        return ctx

    return dependency
