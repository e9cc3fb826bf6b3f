"""Client (customer) repository."""
from __future__ import annotations

from typing import Any, Optional

from backoffice.core.errors import ConflictError, ValidationError
from backoffice.core.utils import clean_str, optional_ref
from backoffice.domain.catalog import is_valid_email

from .base import EntityRepository, require_fields


class ClientRepository(EntityRepository):
    label = "cliente"
    not_found_message = "Cliente no encontrado"
    mutable_fields = ("nombre", "apellido", "email", "telefono")

    def search(self, nombre: str | None = None, apellido: str | None = None) -> list[dict]:
        first = clean_str(nombre).lower()
        last = clean_str(apellido).lower()
        if not first and not last:
            raise ValidationError("Proporcione nombre y/o apellido para buscar")
        return [
            c for c in self.get_all()
            if (not first or first in clean_str(c.get("nombre")).lower())
            and (not last or last in clean_str(c.get("apellido")).lower())
        ]

    def is_email_available(self, email: str, exclude_id: Any = None, records: list[dict] | None = None) -> bool:
        wanted = clean_str(email).lower()
        exclude = optional_ref(exclude_id, "ID")
        for client in records if records is not None else self.get_all():
            if client.get("id") == exclude:
                continue
            if clean_str(client.get("email")).lower() == wanted:
                return False
        return True

    def _check_email(self, email: Any, records: list[dict], exclude_id: Optional[int] = None) -> str:
        value = clean_str(email)
        if not is_valid_email(value):
            raise ValidationError("Formato de email no válido")
        if not self.is_email_available(value, exclude_id, records=records):
            raise ConflictError("El email ya está en uso")
        return value

    def create(self, data: dict) -> dict:
        require_fields(data, ("nombre", "apellido", "email"))

        def build(new_id: int, records: list[dict]) -> dict:
            return {
                "id": new_id,
                "nombre": clean_str(data.get("nombre")),
                "apellido": clean_str(data.get("apellido")),
                "email": self._check_email(data.get("email"), records),
                "telefono": clean_str(data.get("telefono")),
            }

        return self._append(build)

    def update(self, client_id: Any, patch: dict) -> dict:
        def prepare(current: dict, changes: dict, records: list[dict]) -> dict:
            if "email" in changes:
                changes["email"] = self._check_email(changes["email"], records, exclude_id=current["id"])
            for field in ("nombre", "apellido"):
                if field in changes and not clean_str(changes[field]):
                    raise ValidationError(f"El campo {field} no puede estar vacío")
            return changes

        return self._merge(client_id, patch, prepare)

    @staticmethod
    def display_name(client: dict | None) -> str:
        if not client:
            return ""
        return " ".join(part for part in (clean_str(client.get("nombre")), clean_str(client.get("apellido"))) if part)
