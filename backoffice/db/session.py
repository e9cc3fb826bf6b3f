"""
Engine/session helpers for the SQL backend.

Engines are cached per database URL, so a store built from an injected
`Settings` never falls back to the process-wide DATABASE_URL.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from backoffice.core.config import get_settings

Base = declarative_base()


def resolve_url(url: Optional[str] = None) -> str:
    resolved = (url or get_settings().database_url or "").strip()
    if not resolved:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    return resolved


@lru_cache
def _engine_for(url: str) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, future=True, pool_pre_ping=True)


@lru_cache
def _sessionmaker_for(url: str) -> sessionmaker:
    return sessionmaker(bind=_engine_for(url), autoflush=False, autocommit=False, future=True)


def get_engine(url: Optional[str] = None) -> Engine:
    """Engine for `url`, or for the configured DATABASE_URL when omitted."""
    return _engine_for(resolve_url(url))


@contextmanager
def get_session(url: Optional[str] = None) -> Session:
    session: Session = _sessionmaker_for(resolve_url(url))()
    try:
        yield session
    finally:
        session.close()


def dispose_engine(url: Optional[str] = None) -> None:
    """Close the pool for `url` and drop it from the caches."""
    get_engine(url).dispose()
    _sessionmaker_for.cache_clear()
    _engine_for.cache_clear()
