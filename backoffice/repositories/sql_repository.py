"""Record store backed by the SQLAlchemy `records` table."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from backoffice.core.errors import StorageError
from backoffice.core.logging_config import get_logger
from backoffice.db.models import Record
from backoffice.db.session import get_session

from .json_storage import RecordStore

logger = get_logger(__name__)


class SqlRecordStore(RecordStore):
    """Keeps each record as a JSON blob keyed by (entity, id)."""

    def __init__(self, key: str, database_url: Optional[str] = None) -> None:
        super().__init__(key)
        self.database_url = database_url

    def load(self) -> list[dict]:
        stmt = select(Record.data).where(Record.entity == self.key).order_by(Record.record_id)
        try:
            with get_session(self.database_url) as session:
                return [dict(row) for row in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as exc:
            logger.error("Failed to load %s: %s", self.key, exc)
            raise StorageError(f"No se pudo leer {self.key}") from exc

    def save_all(self, records: list[dict]) -> None:
        with self._lock:
            try:
                with get_session(self.database_url) as session:
                    session.execute(delete(Record).where(Record.entity == self.key))
                    for record in records:
                        session.add(Record(entity=self.key, record_id=int(record["id"]), data=dict(record)))
                    session.commit()
            except SQLAlchemyError as exc:
                logger.error("Failed to save %s: %s", self.key, exc)
                raise StorageError(f"No se pudo guardar {self.key}") from exc
