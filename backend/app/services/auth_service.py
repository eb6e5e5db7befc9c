from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

from sqlalchemy.orm import Session

from ..errors import InvalidTokenError, NotAdminError
from ..integrations.identity import IdentityClient
from ..models import Admin
from ..models.base import utcnow

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "admin_token"
SESSION_UID_KEY = "admin_uid"


class AuthService:
    """Admin login and per-request session checks.

    Nothing is cached between requests: every session check re-verifies the
    stored identity token with the provider and re-reads the admin row, so
    removing an admin revokes access on their next request.
    """

    def __init__(self, db: Session, identity: IdentityClient) -> None:
        self.db = db
        self.identity = identity

    def login(self, token: str) -> Admin:
        claims = self.identity.verify_id_token(token)
        admin = self.db.get(Admin, claims.uid)
        if admin is None:
            logger.warning("login_rejected_not_admin uid=%s email=%s", claims.uid, claims.email)
            raise NotAdminError()
        admin.last_login_at = utcnow()
        self.db.commit()
        logger.info("admin_login uid=%s", admin.id)
        return admin

    def login_with_password(self, email: str, password: str) -> tuple[str, Admin]:
        token = self.identity.sign_in_with_password(email.strip().lower(), password)
        return token, self.login(token)

    def start_session(self, session: MutableMapping[str, Any], token: str, admin: Admin) -> None:
        session.clear()
        session[SESSION_TOKEN_KEY] = token
        session[SESSION_UID_KEY] = admin.id

    def session_admin(self, session: MutableMapping[str, Any]) -> Optional[Admin]:
        token = session.get(SESSION_TOKEN_KEY)
        if not token:
            return None
        try:
            claims = self.identity.verify_id_token(token)
        except InvalidTokenError:
            logger.info("session_token_rejected uid=%s", session.get(SESSION_UID_KEY))
            return None
        if claims.uid != session.get(SESSION_UID_KEY):
            return None
        return self.db.get(Admin, claims.uid)

    @staticmethod
    def end_session(session: MutableMapping[str, Any]) -> None:
        session.clear()


__all__ = ["AuthService", "SESSION_TOKEN_KEY", "SESSION_UID_KEY"]
