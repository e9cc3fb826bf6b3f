from __future__ import annotations

import json

from backoffice.services.normalization import normalize_data_dir


def _write(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def _legacy_data(tmp_path):
    _write(tmp_path / "empleados.json", {"empleados": [{"id": 1, "nombre": "Laura", "activo": True}]})
    _write(tmp_path / "insumos.json", {"insumos": [
        {"id": 1, "nombre": "Tomate", "categoria": "Verduras", "stock": "0", "stockMinimo": "3"},
        {"id": 2, "nombre": "Vaso", "categoria": "vajilla", "stock": 10, "stockMinimo": 2},
    ]})
    _write(tmp_path / "pedidos.json", {"pedidos": [
        {"id": 7, "total": "150", "items": [{"producto": "Té", "cantidad": "2", "precio": "75"}], "itemsText": "Té x2"},
    ]})
    _write(tmp_path / "tareas.json", {"tareas": [
        {"id": 1, "titulo": "Entregar", "area": "gestion_pedidos", "empleadoAsignado": 9, "pedidoAsociado": 7},
    ]})


def test_normalizes_supplies_orders_and_tasks(tmp_path):
    _legacy_data(tmp_path)

    counts = normalize_data_dir(tmp_path)

    supplies = _read(tmp_path / "insumos.json")
    assert supplies["schemaVersion"] == 1
    tomate, vaso = supplies["insumos"]
    assert (tomate["categoria"], tomate["stock"], tomate["estado"]) == ("alimentos", 0, "sin_stock")
    assert vaso["categoria"] == "otros"
    assert vaso["unidadMedida"] == "" and vaso["ultimaActualizacion"]

    order = _read(tmp_path / "pedidos.json")["pedidos"][0]
    assert order["total"] == 150
    assert order["items"] == [{"producto": "Té", "cantidad": 2, "precio": 75}]
    assert "itemsText" not in order

    tasks = _read(tmp_path / "tareas.json")["tareas"]
    assert tasks[0]["empleadoAsignado"] is None
    assert tasks[0]["pedidoAsociado"] == 7
    assert tasks[0]["observaciones"] == ""
    assert tasks[1]["area"] == "control_inventario"
    assert tasks[1]["id"] == 2

    assert counts == {"insumos": 2, "pedidos": 1, "tareas": 2}


def test_writes_backups_and_leaves_employees_untouched(tmp_path):
    _legacy_data(tmp_path)
    employees_before = (tmp_path / "empleados.json").read_bytes()

    normalize_data_dir(tmp_path)

    backups = sorted(p.name for p in tmp_path.glob("*.backup.*.json"))
    assert len(backups) == 3
    assert any(name.startswith("insumos.backup.") for name in backups)
    assert (tmp_path / "empleados.json").read_bytes() == employees_before
    assert not list(tmp_path.glob("empleados.backup.*"))


def test_second_run_changes_nothing(tmp_path):
    _legacy_data(tmp_path)
    normalize_data_dir(tmp_path)

    counts = normalize_data_dir(tmp_path)

    assert counts == {"insumos": 0, "pedidos": 0, "tareas": 0}


def test_keeps_existing_schema_version(tmp_path):
    _legacy_data(tmp_path)
    _write(tmp_path / "pedidos.json", {"pedidos": [], "schemaVersion": 3})

    normalize_data_dir(tmp_path)

    assert _read(tmp_path / "pedidos.json")["schemaVersion"] == 3
