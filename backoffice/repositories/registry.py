"""Wires stores and repositories for the configured storage backend."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from backoffice.core.config import Settings, get_settings
from backoffice.core.logging_config import get_logger

from .clients import ClientRepository
from .employees import EmployeeRepository
from .json_storage import JsonFileStore, MemoryStore, RecordStore
from .orders import OrderRepository
from .supplies import SupplyRepository
from .tasks import TaskRepository

logger = get_logger(__name__)

# entity key -> file name under DATA_DIR
ENTITY_FILES = {
    "empleados": "empleados.json",
    "tareas": "tareas.json",
    "pedidos": "pedidos.json",
    "insumos": "insumos.json",
    "clientes": "clientes.json",
}


@dataclass
class Repositories:
    employees: EmployeeRepository
    tasks: TaskRepository
    orders: OrderRepository
    supplies: SupplyRepository
    clients: ClientRepository


def build_store(settings: Settings, key: str) -> RecordStore:
    if settings.storage_backend == "memory":
        return MemoryStore(key)
    if settings.storage_backend == "sql":
        from .sql_repository import SqlRecordStore

        return SqlRecordStore(key, settings.database_url)
    return JsonFileStore(settings.data_dir / ENTITY_FILES[key], key)


def build_repositories(
    settings: Optional[Settings] = None,
    stores: Optional[Mapping[str, RecordStore]] = None,
) -> Repositories:
    """
    Build the repository set. `stores` overrides individual entity stores
    (tests pass MemoryStore instances); missing ones come from `settings`.
    """
    settings = settings or get_settings()
    stores = dict(stores or {})
    if settings.storage_backend == "sql" and len(stores) < len(ENTITY_FILES):
        from backoffice.db.create_tables import create_all

        create_all(settings.database_url)
    for key in ENTITY_FILES:
        if key not in stores:
            stores[key] = build_store(settings, key)
    logger.info("Storage backend: %s", settings.storage_backend)

    clients = ClientRepository(stores["clientes"])
    employees = EmployeeRepository(stores["empleados"])
    orders = OrderRepository(stores["pedidos"], clients=clients)
    return Repositories(
        employees=employees,
        tasks=TaskRepository(stores["tareas"], employees=employees, orders=orders),
        orders=orders,
        supplies=SupplyRepository(stores["insumos"]),
        clients=clients,
    )
