"""Shared CRUD shape for the per-entity repositories."""
from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from backoffice.core.errors import NotFoundError, StorageError, ValidationError
from backoffice.core.logging_config import get_logger
from backoffice.core.utils import clean_str, coerce_id
from backoffice.domain.catalog import choices_message

from .json_storage import RecordStore

logger = get_logger(__name__)


def stored_id(record: dict) -> Optional[int]:
    """Id of a persisted record as an int; hand-edited files may hold "3" instead of 3."""
    value = record.get("id")
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise StorageError(f"ID inválido en registro: {value!r}")
    try:
        return int(str(value).strip())
    except ValueError:
        raise StorageError(f"ID inválido en registro: {value!r}")


def next_id(records: Iterable[dict]) -> int:
    ids = [stored_id(r) or 0 for r in records]
    return max(ids) + 1 if ids else 1


def find_index(records: list[dict], record_id: int) -> int:
    for index, record in enumerate(records):
        if stored_id(record) == record_id:
            return index
    return -1


class EntityRepository:
    """
    Wraps a RecordStore with the common operations.

    Subclasses set `label` (used in messages), `not_found_message` and
    `mutable_fields`, the only keys accepted by `update`.
    """

    label = "registro"
    not_found_message = "Registro no encontrado"
    mutable_fields: tuple[str, ...] = ()

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    # -------------------------- reads --------------------------
    def get_all(self) -> list[dict]:
        return self.store.load()

    def get_by_id(self, record_id: Any) -> Optional[dict]:
        rid = coerce_id(record_id)
        records = self.store.load()
        index = find_index(records, rid)
        return records[index] if index != -1 else None

    def require(self, record_id: Any) -> dict:
        record = self.get_by_id(record_id)
        if record is None:
            raise NotFoundError(self.not_found_message)
        return record

    def filter_by(self, field: str, value: Any, predicate: Callable[[dict], bool] | None = None) -> list[dict]:
        return [
            r for r in self.store.load()
            if r.get(field) == value and (predicate is None or predicate(r))
        ]

    # -------------------------- writes --------------------------
    def clean_patch(self, patch: dict | None) -> dict:
        if not patch:
            raise ValidationError("El body de la solicitud no puede estar vacío")
        if not isinstance(patch, dict):
            raise ValidationError("El body debe ser un objeto JSON")
        unknown = sorted(set(patch) - set(self.mutable_fields))
        if unknown:
            raise ValidationError(
                f"Campos no permitidos: {', '.join(unknown)}",
                details={"camposPermitidos": list(self.mutable_fields)},
            )
        return {key: value.strip() if isinstance(value, str) else value for key, value in patch.items()}

    def _append(self, build: Callable[[int, list[dict]], dict]) -> dict:
        with self.store.locked():
            records = self.store.load()
            record = build(next_id(records), records)
            records.append(record)
            self.store.save_all(records)
        logger.info("Created %s id=%s", self.label, record["id"])
        return record

    def _merge(self, record_id: Any, patch: dict, prepare: Callable[[dict, dict, list[dict]], dict] | None = None) -> dict:
        rid = coerce_id(record_id)
        changes = self.clean_patch(patch)
        with self.store.locked():
            records = self.store.load()
            index = find_index(records, rid)
            if index == -1:
                raise NotFoundError(self.not_found_message)
            if prepare is not None:
                changes = prepare(records[index], changes, records)
            records[index] = {**records[index], **changes}
            self.store.save_all(records)
        logger.info("Updated %s id=%s fields=%s", self.label, rid, sorted(changes))
        return records[index]

    def _set_fields(self, record_id: Any, values: dict) -> dict:
        """Internal update that bypasses the patch whitelist (derived fields, flags)."""
        rid = coerce_id(record_id)
        with self.store.locked():
            records = self.store.load()
            index = find_index(records, rid)
            if index == -1:
                raise NotFoundError(self.not_found_message)
            records[index] = {**records[index], **values}
            self.store.save_all(records)
        return records[index]

    def delete(self, record_id: Any) -> dict:
        """Hard delete; returns the removed record. The store is untouched when the id is absent."""
        rid = coerce_id(record_id)
        with self.store.locked():
            records = self.store.load()
            index = find_index(records, rid)
            if index == -1:
                raise NotFoundError(self.not_found_message)
            removed = records.pop(index)
            self.store.save_all(records)
        logger.info("Deleted %s id=%s", self.label, rid)
        return removed


def _is_blank(value: Any) -> bool:
    if isinstance(value, (list, dict)):
        return not value
    return not clean_str(value)


def require_fields(data: dict, fields: Iterable[str]) -> None:
    missing = [field for field in fields if _is_blank(data.get(field))]
    if missing:
        raise ValidationError(
            f"Campos requeridos faltantes: {', '.join(missing)}",
            details={"camposFaltantes": missing},
        )


def require_choice(value: Any, choices: tuple[str, ...], label: str) -> str:
    if value not in choices:
        raise ValidationError(choices_message(label, choices))
    return value
