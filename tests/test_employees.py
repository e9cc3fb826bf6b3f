from __future__ import annotations

import pytest

from backoffice.core.errors import ConflictError, NotFoundError, ValidationError


def _payload(**overrides):
    data = {
        "nombre": "Carla",
        "apellido": "Sosa",
        "email": "carla@resto.com",
        "rol": "mozo",
        "area": "salon",
    }
    data.update(overrides)
    return data


def test_create_assigns_first_id_and_defaults(repos):
    employee = repos.employees.create(_payload())
    assert employee["id"] == 1
    assert employee["activo"] is True
    assert len(employee["fechaIngreso"]) == 10


def test_create_assigns_max_plus_one(seeded_repos):
    employee = seeded_repos.employees.create(_payload())
    assert employee["id"] == 4


def test_duplicate_email_among_active_is_rejected_case_insensitive(seeded_repos):
    with pytest.raises(ConflictError):
        seeded_repos.employees.create(_payload(email="LAURA@resto.com"))


def test_email_of_inactive_employee_can_be_reused(seeded_repos):
    employee = seeded_repos.employees.create(_payload(email="ana@resto.com"))
    assert employee["email"] == "ana@resto.com"


@pytest.mark.parametrize(
    "overrides",
    [{"email": "no-es-email"}, {"rol": "chef"}, {"area": "terraza"}, {"nombre": "  "}],
)
def test_create_validates_fields(repos, overrides):
    with pytest.raises(ValidationError):
        repos.employees.create(_payload(**overrides))


def test_missing_fields_are_reported(repos):
    with pytest.raises(ValidationError) as info:
        repos.employees.create({"nombre": "X"})
    assert info.value.details["camposFaltantes"] == ["apellido", "email", "rol", "area"]


def test_queries_only_return_active(seeded_repos):
    assert [e["id"] for e in seeded_repos.employees.get_active()] == [1, 2]
    assert [e["id"] for e in seeded_repos.employees.get_by_role("cocinero")] == [2]
    assert [e["id"] for e in seeded_repos.employees.get_by_area("cocina")] == [2]


def test_invalid_role_lists_valid_values(seeded_repos):
    with pytest.raises(ValidationError) as info:
        seeded_repos.employees.get_by_role("chef")
    assert "administrador" in info.value.message


def test_update_rejects_unknown_fields(seeded_repos):
    with pytest.raises(ValidationError):
        seeded_repos.employees.update(1, {"id": 99})
    with pytest.raises(ValidationError):
        seeded_repos.employees.update(1, {})


def test_update_email_excludes_self(seeded_repos):
    updated = seeded_repos.employees.update(1, {"email": "Laura@resto.com", "telefono": "123"})
    assert updated["email"] == "Laura@resto.com"
    with pytest.raises(ConflictError):
        seeded_repos.employees.update(1, {"email": "martin@resto.com"})


def test_reactivation_checks_email(seeded_repos):
    seeded_repos.employees.create(_payload(email="ana@resto.com"))
    with pytest.raises(ConflictError):
        seeded_repos.employees.update(3, {"activo": True})


def test_delete_is_soft_by_default(seeded_repos):
    employee = seeded_repos.employees.delete(2)
    assert employee["activo"] is False
    assert seeded_repos.employees.get_by_id(2) is not None


def test_hard_delete_removes_record(seeded_repos):
    seeded_repos.employees.delete(2, hard=True)
    assert seeded_repos.employees.get_by_id(2) is None


def test_delete_missing_leaves_store_untouched(seeded_repos):
    before = seeded_repos.employees.get_all()
    with pytest.raises(NotFoundError):
        seeded_repos.employees.delete(99, hard=True)
    assert seeded_repos.employees.get_all() == before


def test_stats_counts_active_only(seeded_repos):
    stats = seeded_repos.employees.stats()
    assert stats["total"] == 2
    assert stats["porRol"]["cocinero"] == 1
    assert stats["porArea"]["administracion"] == 1


def test_invalid_id_is_validation_error(seeded_repos):
    with pytest.raises(ValidationError):
        seeded_repos.employees.get_by_id("abc")
    with pytest.raises(ValidationError):
        seeded_repos.employees.get_by_id(0)
