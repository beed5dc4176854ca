# venue_finance/db/session.py
from __future__ import annotations

from typing import Any, Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from venue_finance.core.config import settings


def make_engine(url: str, **kwargs: Any) -> Engine:
    """Engine for ``url``.

    SQLite connections are shared with FastAPI's threadpool, so the
    same-thread check is turned off there. Postgres gets pre-ping so stale
    pooled connections are replaced instead of failing a request.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


def make_sessionmaker(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, expire_on_commit=False)


engine = make_engine(settings.sqlalchemy_database_url)
SessionLocal = make_sessionmaker(engine)


# FastAPI Dependency: one session per request
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
