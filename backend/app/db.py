from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from .config import settings


def _engine_options(url: str) -> dict:
    options = {"echo": settings.DB_SYNC_ECHO, "pool_pre_ping": True, "future": True}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return options


engine = create_engine(settings.sync_database_url, **_engine_options(settings.sync_database_url))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
