from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from ..auth import AdminContext, client_ip, get_auth_service, require_admin
from ..errors import InvalidRequestError
from ..services.audit_service import ADMIN_LOGIN, TARGET_ADMIN, AuditLogService
from ..services.auth_service import AuthService


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    auth: AuthService = Depends(get_auth_service),
):
    token = payload.get("token")
    if not token or not isinstance(token, str):
        raise InvalidRequestError("Invalid request: token is required")
    admin = auth.login(token)
    auth.start_session(request.session, token, admin)
    AuditLogService(auth.db).log_event(ADMIN_LOGIN, admin.id, TARGET_ADMIN, admin.id, ip_address=client_ip(request))
    return {
        "success": True,
        "admin": {"uid": admin.id, "email": admin.email, "displayName": admin.display_name or ""},
    }


@router.post("/logout")
def logout(request: Request):
    AuthService.end_session(request.session)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
def me(ctx: AdminContext = Depends(require_admin)):
    return {"success": True, "admin": ctx.profile(), "role": ctx.role, "permissions": ctx.permissions}
