from __future__ import annotations

import pytest

from backoffice.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from backoffice.repositories.clients import ClientRepository
from backoffice.repositories.json_storage import MemoryStore


def test_create_and_duplicate_email(seeded_repos):
    client = seeded_repos.clients.create({"nombre": "Rosa", "apellido": "Luna", "email": "rosa@mail.com"})
    assert client["id"] == 2
    with pytest.raises(ConflictError):
        seeded_repos.clients.create({"nombre": "Otra", "apellido": "Rosa", "email": "ROSA@mail.com"})


def test_create_requires_valid_email(repos):
    with pytest.raises(ValidationError):
        repos.clients.create({"nombre": "A", "apellido": "B", "email": "a@b"})


def test_search_is_case_insensitive_substring(seeded_repos):
    assert [c["id"] for c in seeded_repos.clients.search(nombre="JU")] == [1]
    assert seeded_repos.clients.search(apellido="gómez") == []
    with pytest.raises(ValidationError):
        seeded_repos.clients.search()


def test_email_availability(seeded_repos):
    assert seeded_repos.clients.is_email_available("juan@mail.com") is False
    assert seeded_repos.clients.is_email_available("juan@mail.com", exclude_id="1") is True
    assert seeded_repos.clients.is_email_available("nuevo@mail.com") is True


def test_update_and_delete(seeded_repos):
    updated = seeded_repos.clients.update(1, {"telefono": " 555 "})
    assert updated["telefono"] == "555"
    seeded_repos.clients.delete(1)
    with pytest.raises(NotFoundError):
        seeded_repos.clients.update(1, {"telefono": "1"})


def test_display_name():
    from backoffice.repositories.clients import ClientRepository

    assert ClientRepository.display_name({"nombre": "Juan", "apellido": "Pérez"}) == "Juan Pérez"
    assert ClientRepository.display_name(None) == ""


def _hand_edited(records):
    return ClientRepository(MemoryStore("clientes", records))


def test_string_ids_in_stored_records_are_matched():
    clients = _hand_edited([
        {"id": "3", "nombre": "Eva", "apellido": "Sosa", "email": "eva@mail.com", "telefono": ""},
    ])
    assert clients.get_by_id(3)["nombre"] == "Eva"
    assert clients.update(3, {"telefono": "555-1234"})["telefono"] == "555-1234"

    created = clients.create({"nombre": "Leo", "apellido": "Paz", "email": "leo@mail.com"})
    assert created["id"] == 4

    clients.delete("3")
    assert [c["id"] for c in clients.get_all()] == [4]


@pytest.mark.parametrize("bad_id", ["abc", True, [1]])
def test_unusable_stored_id_is_a_storage_error(bad_id):
    clients = _hand_edited([{"id": bad_id, "nombre": "X", "apellido": "Y", "email": "x@mail.com"}])
    with pytest.raises(StorageError):
        clients.get_by_id(1)
    with pytest.raises(StorageError):
        clients.create({"nombre": "Leo", "apellido": "Paz", "email": "leo@mail.com"})
