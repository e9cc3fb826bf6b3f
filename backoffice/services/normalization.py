"""
One-off normalization of legacy data files.

Idempotent, but every run writes a `<name>.backup.<timestamp>.json` copy of
each document before overwriting it. Employees are only read (their ids
validate task references).
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import copy
import shutil

from backoffice.core.logging_config import get_logger
from backoffice.core.utils import now_iso, to_number
from backoffice.domain.catalog import normalize_category, supply_status
from backoffice.repositories.base import next_id
from backoffice.repositories.json_storage import JsonFileStore
from backoffice.repositories.registry import ENTITY_FILES

logger = get_logger(__name__)

SCHEMA_VERSION = 1
INVENTORY_TASK = {
    "titulo": "Registrar ingreso de queso",
    "descripcion": "Ingreso de 5 kg de queso mozzarella",
    "area": "control_inventario",
    "estado": "pendiente",
    "prioridad": "media",
    "empleadoAsignado": None,
    "pedidoAsociado": None,
    "observaciones": "Generada por script de normalización",
}


def backup_name(path: Path, stamp: str | None = None) -> Path:
    stamp = stamp or datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    return path.with_name(f"{path.stem}.backup.{stamp}.json")


def normalize_supply(supply: dict) -> dict:
    stock = to_number(supply.get("stock"), 0)
    minimum = to_number(supply.get("stockMinimo"), 0)
    return {
        **supply,
        "stock": stock,
        "stockMinimo": minimum,
        "categoria": normalize_category(supply.get("categoria")),
        "estado": supply_status(stock, minimum),
        "unidadMedida": supply.get("unidadMedida") or "",
        "proveedor": supply.get("proveedor") or "",
        "ultimaActualizacion": supply.get("ultimaActualizacion") or now_iso(),
    }


def normalize_order(order: dict) -> dict:
    items = order.get("items") if isinstance(order.get("items"), list) else []
    normalized = {
        **order,
        "total": to_number(order.get("total"), 0),
        "tiempoEstimado": to_number(order.get("tiempoEstimado"), 0),
        "items": [
            {
                "producto": item.get("producto"),
                "cantidad": to_number(item.get("cantidad"), 0),
                "precio": to_number(item.get("precio"), 0),
            }
            for item in items
            if isinstance(item, dict)
        ],
    }
    normalized.pop("itemsText", None)
    return normalized


def normalize_task(task: dict, employee_ids: set, order_ids: set) -> dict:
    normalized = {**task}
    if normalized.get("empleadoAsignado") is not None and normalized["empleadoAsignado"] not in employee_ids:
        normalized["empleadoAsignado"] = None
    if normalized.get("pedidoAsociado") is not None and normalized["pedidoAsociado"] not in order_ids:
        normalized["pedidoAsociado"] = None
    normalized.setdefault("observaciones", "")
    normalized.setdefault("fechaInicio", None)
    normalized.setdefault("fechaFinalizacion", None)
    return normalized


def _normalize_all(records: list[dict], fn) -> tuple[list[dict], int]:
    result, modified = [], 0
    for record in records:
        updated = fn(copy.deepcopy(record))
        if updated != record:
            modified += 1
        result.append(updated)
    return result, modified


def normalize_data_dir(data_dir: Path | str) -> dict[str, int]:
    """Normalize supplies, orders and tasks under `data_dir`. Returns modified counts per entity."""
    data_dir = Path(data_dir)
    stores = {key: JsonFileStore(data_dir / name, key) for key, name in ENTITY_FILES.items()}
    documents = {key: store.read_document() for key, store in stores.items()}

    def records_of(key: str) -> list[dict]:
        records = documents[key].get(key)
        return records if isinstance(records, list) else []

    employee_ids = {e.get("id") for e in records_of("empleados")}
    order_ids = {o.get("id") for o in records_of("pedidos")}

    supplies, supplies_modified = _normalize_all(records_of("insumos"), normalize_supply)
    orders, orders_modified = _normalize_all(records_of("pedidos"), normalize_order)
    tasks, tasks_modified = _normalize_all(
        records_of("tareas"), lambda t: normalize_task(t, employee_ids, order_ids)
    )
    if not any(t.get("area") == "control_inventario" for t in tasks):
        tasks.append(
            {
                "id": next_id(tasks),
                **INVENTORY_TASK,
                "fechaCreacion": now_iso(),
                "fechaInicio": None,
                "fechaFinalizacion": None,
            }
        )
        tasks_modified += 1
        logger.info("Added a control_inventario task")

    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    for key, records in (("insumos", supplies), ("pedidos", orders), ("tareas", tasks)):
        store = stores[key]
        if store.path.exists():
            backup = backup_name(store.path, stamp)
            shutil.copy2(store.path, backup)
            logger.info("Backup of %s written to %s", store.path.name, backup.name)
        document = {**documents[key], key: records}
        document.setdefault("schemaVersion", SCHEMA_VERSION)
        store.write_document(document)
        logger.info("Normalized %s", store.path.name)

    counts = {"insumos": supplies_modified, "pedidos": orders_modified, "tareas": tasks_modified}
    logger.info("Normalization summary: %s", counts)
    return counts
