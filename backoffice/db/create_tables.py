"""Creates the `records` table for the SQL backend (`python -m backoffice.db.create_tables`)."""
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from backoffice.core.logging_config import get_logger

from .session import Base, get_engine
from . import models  # noqa: F401  # registers Record on Base.metadata

logger = get_logger(__name__)


def create_all(url: Optional[str] = None) -> None:
    """Idempotent: existing tables are left untouched."""
    engine = get_engine(url)
    Base.metadata.create_all(bind=engine)
    logger.debug("Schema ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except (RuntimeError, SQLAlchemyError) as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
