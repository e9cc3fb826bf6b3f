from __future__ import annotations

import pytest

from backoffice.core.errors import NotFoundError, ValidationError


def test_create_defaults(seeded_repos):
    task = seeded_repos.tasks.create({"titulo": "Limpiar", "area": "control_inventario"})
    assert task["id"] == 4
    assert task["estado"] == "pendiente"
    assert task["prioridad"] == "media"
    assert task["fechaInicio"] is None
    assert task["fechaFinalizacion"] is None
    assert task["empleadoAsignado"] is None


def test_create_validates_area_priority_and_refs(seeded_repos):
    with pytest.raises(ValidationError):
        seeded_repos.tasks.create({"titulo": "X", "area": "cocina"})
    with pytest.raises(ValidationError):
        seeded_repos.tasks.create({"titulo": "X", "area": "gestion_pedidos", "prioridad": "urgente"})
    with pytest.raises(NotFoundError):
        seeded_repos.tasks.create({"titulo": "X", "area": "gestion_pedidos", "empleadoAsignado": 99})
    with pytest.raises(NotFoundError):
        seeded_repos.tasks.create({"titulo": "X", "area": "gestion_pedidos", "pedidoAsociado": 99})


def test_start_date_is_set_once(seeded_repos):
    started = seeded_repos.tasks.transition(1, "en_proceso")
    assert started["fechaInicio"] is not None

    seeded_repos.tasks.update(1, {"observaciones": "sin cebolla"})
    finished = seeded_repos.tasks.transition(1, "finalizada")

    assert finished["fechaInicio"] == started["fechaInicio"]
    assert finished["fechaFinalizacion"] is not None


def test_same_status_keeps_dates(seeded_repos):
    task = seeded_repos.tasks.update(3, {"estado": "en_proceso"})
    assert task["fechaInicio"] == "2024-06-03T08:30:00.000Z"


def test_jump_to_finished_sets_both_dates(seeded_repos):
    task = seeded_repos.tasks.transition(1, "finalizada")
    assert task["fechaInicio"] is not None
    assert task["fechaFinalizacion"] is not None


def test_backward_transition_is_rejected(seeded_repos):
    with pytest.raises(ValidationError):
        seeded_repos.tasks.transition(2, "en_proceso")
    with pytest.raises(ValidationError):
        seeded_repos.tasks.transition(1, "terminada")


def test_dates_are_not_patchable(seeded_repos):
    with pytest.raises(ValidationError):
        seeded_repos.tasks.update(1, {"fechaInicio": "2020-01-01T00:00:00.000Z"})


def test_filter_by_area_returns_exact_subset(seeded_repos):
    result = seeded_repos.tasks.filter({"area": "control_inventario"})
    assert [t["id"] for t in result] == [3]


def test_filters_are_conjunctive(seeded_repos):
    assert [t["id"] for t in seeded_repos.tasks.filter({"area": "gestion_pedidos", "prioridad": "alta"})] == [1]
    assert seeded_repos.tasks.filter({"area": "control_inventario", "prioridad": "alta"}) == []
    assert [t["id"] for t in seeded_repos.tasks.filter({"empleadoAsignado": "1"})] == [2]


def test_filter_by_creation_range_includes_whole_end_day(seeded_repos):
    result = seeded_repos.tasks.filter({"fechaDesde": "2024-06-02", "fechaHasta": "2024-06-02"})
    assert [t["id"] for t in result] == [2]


def test_filter_by_start_and_finish_ranges(seeded_repos):
    assert [t["id"] for t in seeded_repos.tasks.filter({"inicioDesde": "2024-06-03"})] == [3]
    assert [t["id"] for t in seeded_repos.tasks.filter({"finHasta": "2024-06-02"})] == [2]


def test_filter_rejects_bad_ranges(seeded_repos):
    with pytest.raises(ValidationError):
        seeded_repos.tasks.filter({"fechaDesde": "2024-06-05", "fechaHasta": "2024-06-01"})
    with pytest.raises(ValidationError):
        seeded_repos.tasks.filter({"fechaDesde": "ayer"})


def test_filter_by_platform_keeps_tasks_without_order(seeded_repos):
    result = seeded_repos.tasks.filter({"plataforma": "rappi"})
    assert [t["id"] for t in result] == [1, 3]
    result = seeded_repos.tasks.filter({"tipoPedido": "presencial"})
    assert [t["id"] for t in result] == [2, 3]
    assert len(seeded_repos.tasks.filter({"plataforma": "todos"})) == 3


def test_get_by_status_and_employee(seeded_repos):
    assert [t["id"] for t in seeded_repos.tasks.get_by_status("finalizada")] == [2]
    assert [t["id"] for t in seeded_repos.tasks.get_by_employee(2)] == [1]


def test_deleting_order_leaves_task_reference(seeded_repos):
    seeded_repos.orders.delete(1)
    assert seeded_repos.tasks.get_by_id(1)["pedidoAsociado"] == 1
