from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    # naive UTC, same as what the columns store
    return datetime.now(timezone.utc).replace(tzinfo=None)
