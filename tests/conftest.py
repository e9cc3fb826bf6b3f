from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the backoffice package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backoffice.core.config import Settings
from backoffice.repositories.json_storage import MemoryStore
from backoffice.repositories.registry import build_repositories


def make_settings(tmp_path: Path, backend: str = "memory", **overrides) -> Settings:
    values = dict(
        app_env="test",
        data_dir=tmp_path,
        storage_backend=backend,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        log_level="WARNING",
        cors_origins=("*",),
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture()
def repos(settings):
    return build_repositories(settings)


@pytest.fixture()
def seeded_repos(settings):
    """Small consistent dataset shared by the repository and API tests."""
    stores = {
        "empleados": MemoryStore("empleados", [
            {"id": 1, "nombre": "Laura", "apellido": "Gómez", "email": "laura@resto.com", "telefono": "",
             "rol": "administrador", "area": "administracion", "fechaIngreso": "2023-02-01", "activo": True},
            {"id": 2, "nombre": "Martín", "apellido": "Pérez", "email": "martin@resto.com", "telefono": "",
             "rol": "cocinero", "area": "cocina", "fechaIngreso": "2023-05-15", "activo": True},
            {"id": 3, "nombre": "Ana", "apellido": "Díaz", "email": "ana@resto.com", "telefono": "",
             "rol": "cocinero", "area": "cocina", "fechaIngreso": "2022-01-01", "activo": False},
        ]),
        "clientes": MemoryStore("clientes", [
            {"id": 1, "nombre": "Juan", "apellido": "Fernández", "email": "juan@mail.com", "telefono": ""},
        ]),
        "pedidos": MemoryStore("pedidos", [
            {"id": 1, "numeroOrden": "ORD-001", "clienteId": 1, "cliente": "",
             "items": [{"producto": "Pizza", "cantidad": 2, "precio": 100}], "total": 200,
             "tipo": "delivery", "plataforma": "rappi", "estado": "pendiente",
             "fechaCreacion": "2024-06-01T20:00:00.000Z", "fechaActualizacion": "2024-06-01T20:00:00.000Z",
             "tiempoEstimado": 30, "observaciones": ""},
            {"id": 2, "numeroOrden": "ORD-002", "clienteId": None, "cliente": "Mesa 4",
             "items": [{"producto": "Café", "cantidad": 1, "precio": 50}], "total": 50,
             "tipo": "presencial", "plataforma": "local", "estado": "entregado",
             "fechaCreacion": "2024-06-02T10:00:00.000Z", "fechaActualizacion": "2024-06-02T10:00:00.000Z",
             "tiempoEstimado": 10, "observaciones": ""},
        ]),
        "tareas": MemoryStore("tareas", [
            {"id": 1, "titulo": "Preparar ORD-001", "descripcion": "", "area": "gestion_pedidos",
             "estado": "pendiente", "prioridad": "alta", "empleadoAsignado": 2, "pedidoAsociado": 1,
             "fechaCreacion": "2024-06-01T20:01:00.000Z", "fechaInicio": None, "fechaFinalizacion": None,
             "observaciones": ""},
            {"id": 2, "titulo": "Servir café", "descripcion": "", "area": "gestion_pedidos",
             "estado": "finalizada", "prioridad": "baja", "empleadoAsignado": 1, "pedidoAsociado": 2,
             "fechaCreacion": "2024-06-02T10:01:00.000Z", "fechaInicio": "2024-06-02T10:02:00.000Z",
             "fechaFinalizacion": "2024-06-02T10:10:00.000Z", "observaciones": ""},
            {"id": 3, "titulo": "Contar stock", "descripcion": "", "area": "control_inventario",
             "estado": "en_proceso", "prioridad": "media", "empleadoAsignado": None, "pedidoAsociado": None,
             "fechaCreacion": "2024-06-03T08:00:00.000Z", "fechaInicio": "2024-06-03T08:30:00.000Z",
             "fechaFinalizacion": None, "observaciones": ""},
        ]),
        "insumos": MemoryStore("insumos", [
            {"id": 1, "nombre": "Queso", "categoria": "alimentos", "stock": 10, "stockMinimo": 5,
             "unidadMedida": "kg", "proveedor": "Lácteos SA", "ultimaActualizacion": "2024-06-01T10:00:00.000Z",
             "estado": "disponible"},
            {"id": 2, "nombre": "Detergente", "categoria": "limpieza", "stock": 2, "stockMinimo": 4,
             "unidadMedida": "l", "proveedor": "", "ultimaActualizacion": "2024-06-01T10:00:00.000Z",
             "estado": "bajo_stock"},
        ]),
    }
    return build_repositories(settings, stores=stores)
