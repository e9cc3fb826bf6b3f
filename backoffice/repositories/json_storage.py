"""
Record stores: whole-array persistence for one entity.

Each entity lives in its own JSON document, `{ "<plural>": [...] }`. Repositories
load the full array, transform it in memory and write it back through
`save_all`, holding `locked()` for the whole read-modify-write cycle.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import copy
import json
import os
import tempfile
import threading

from backoffice.core.errors import StorageError
from backoffice.core.logging_config import get_logger

logger = get_logger(__name__)


def dump_document(document: dict) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2) + "\n"


class RecordStore:
    """Storage interface shared by every backend."""

    def __init__(self, key: str) -> None:
        self.key = key
        self._lock = threading.RLock()

    @contextmanager
    def locked(self):
        with self._lock:
            yield self

    def load(self) -> list[dict]:
        raise NotImplementedError

    def save_all(self, records: list[dict]) -> None:
        raise NotImplementedError


class JsonFileStore(RecordStore):
    def __init__(self, path: Path | str, key: str) -> None:
        super().__init__(key)
        self.path = Path(path)

    def read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON in %s: %s", self.path, exc)
            raise StorageError(f"JSON inválido en {self.path.name}: {exc}") from exc
        except OSError as exc:
            logger.error("Failed to read %s: %s", self.path, exc)
            raise StorageError(f"No se pudo leer {self.path.name}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"Formato inesperado en {self.path.name}")
        return document

    def load(self) -> list[dict]:
        records = self.read_document().get(self.key)
        return records if isinstance(records, list) else []

    def save_all(self, records: list[dict]) -> None:
        with self._lock:
            document = self.read_document() if self.path.exists() else {}
            document[self.key] = records
            self._write_atomic(dump_document(document))

    def write_document(self, document: dict) -> None:
        """Replace the whole document (used by maintenance scripts)."""
        with self._lock:
            self._write_atomic(dump_document(document))

    def _write_atomic(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.stem}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise StorageError(f"No se pudo guardar {self.path.name}") from exc


class MemoryStore(RecordStore):
    """In-process store used by tests and the `memory` backend."""

    def __init__(self, key: str, records: list[dict] | None = None) -> None:
        super().__init__(key)
        self._records = copy.deepcopy(records or [])

    def load(self) -> list[dict]:
        return copy.deepcopy(self._records)

    def save_all(self, records: list[dict]) -> None:
        with self._lock:
            self._records = copy.deepcopy(records)
