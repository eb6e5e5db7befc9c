"""Out-of-band admin provisioning.

    python -m backend.app.scripts.provision_admin --uid <provider uid> --email ops@example.com
    python -m backend.app.scripts.provision_admin --uid <uid> --remove
"""
from __future__ import annotations

import argparse
import sys
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.db import SessionLocal
from backend.app.models import Admin
from backend.app.models.admin import PERMISSION_KEYS, ROLE_ADMIN, ROLE_SUPERADMIN, default_permissions


def build_permissions(deny: Iterable[str] = ()) -> Dict[str, bool]:
    perms = default_permissions()
    for key in deny:
        if key not in perms:
            raise ValueError(f"Unknown permission: {key}")
        perms[key] = False
    return perms


def upsert_admin(
    db: Session,
    uid: str,
    email: str,
    display_name: Optional[str] = None,
    role: str = ROLE_ADMIN,
    deny: Iterable[str] = (),
) -> Admin:
    email_norm = email.strip().lower()
    clash = db.execute(select(Admin).where(Admin.email == email_norm, Admin.id != uid)).scalar_one_or_none()
    if clash:
        raise ValueError(f"Email {email_norm} already belongs to admin {clash.id}")
    admin = db.get(Admin, uid)
    if admin is None:
        admin = Admin(id=uid, email=email_norm)
        db.add(admin)
    admin.email = email_norm
    admin.display_name = display_name
    admin.role = role
    admin.permissions = build_permissions(deny)
    db.commit()
    db.refresh(admin)
    return admin


def remove_admin(db: Session, uid: str) -> bool:
    admin = db.get(Admin, uid)
    if admin is None:
        return False
    db.delete(admin)
    db.commit()
    return True


def main() -> None:
    ap = argparse.ArgumentParser(description="Grant or revoke admin access.")
    ap.add_argument("--uid", required=True, help="Identity-provider user id")
    ap.add_argument("--email", default=None)
    ap.add_argument("--name", default=None, help="Display name")
    ap.add_argument("--role", choices=[ROLE_ADMIN, ROLE_SUPERADMIN], default=ROLE_ADMIN)
    ap.add_argument("--deny", action="append", default=[], choices=list(PERMISSION_KEYS))
    ap.add_argument("--remove", action="store_true")
    args = ap.parse_args()

    with SessionLocal() as db:
        if args.remove:
            removed = remove_admin(db, args.uid)
            print("removed" if removed else "not found")
            return
        if not args.email:
            ap.error("--email is required unless --remove is given")
        try:
            admin = upsert_admin(db, args.uid, args.email, args.name, args.role, args.deny)
        except ValueError as exc:
            print(str(exc), file=sys.stderr)
            sys.exit(1)
        print(f"admin {admin.id} <{admin.email}> role={admin.role} permissions={admin.permissions}")


if __name__ == "__main__":
    main()
