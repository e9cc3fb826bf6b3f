"""Employee repository."""
from __future__ import annotations

from typing import Any, Optional

from backoffice.core.errors import ConflictError, ValidationError
from backoffice.core.logging_config import get_logger
from backoffice.core.utils import clean_str, optional_ref, today_iso
from backoffice.domain.catalog import EMPLOYEE_AREAS, EMPLOYEE_ROLES, is_valid_email

from .base import EntityRepository, require_choice, require_fields

logger = get_logger(__name__)


class EmployeeRepository(EntityRepository):
    label = "empleado"
    not_found_message = "Empleado no encontrado"
    mutable_fields = ("nombre", "apellido", "email", "telefono", "rol", "area", "fechaIngreso", "activo")

    # -------------------------- queries --------------------------
    def get_active(self) -> list[dict]:
        return [e for e in self.get_all() if e.get("activo")]

    def get_by_role(self, rol: str) -> list[dict]:
        require_choice(rol, EMPLOYEE_ROLES, "Rol")
        return self.filter_by("rol", rol, lambda e: bool(e.get("activo")))

    def get_by_area(self, area: str) -> list[dict]:
        require_choice(area, EMPLOYEE_AREAS, "Área")
        return self.filter_by("area", area, lambda e: bool(e.get("activo")))

    def is_email_available(self, email: str, exclude_id: Any = None, records: list[dict] | None = None) -> bool:
        """Emails only need to be unique among active employees (case-insensitive)."""
        wanted = clean_str(email).lower()
        exclude = optional_ref(exclude_id, "ID")
        for employee in records if records is not None else self.get_all():
            if not employee.get("activo") or employee.get("id") == exclude:
                continue
            if clean_str(employee.get("email")).lower() == wanted:
                return False
        return True

    def stats(self) -> dict:
        active = self.get_active()
        return {
            "total": len(active),
            "porRol": {rol: sum(1 for e in active if e.get("rol") == rol) for rol in EMPLOYEE_ROLES},
            "porArea": {area: sum(1 for e in active if e.get("area") == area) for area in EMPLOYEE_AREAS},
        }

    # -------------------------- mutations --------------------------
    def _check_email(self, email: Any, records: list[dict], exclude_id: Optional[int] = None) -> str:
        value = clean_str(email)
        if not is_valid_email(value):
            raise ValidationError("Formato de email no válido")
        if not self.is_email_available(value, exclude_id, records=records):
            raise ConflictError("El email ya está en uso")
        return value

    def create(self, data: dict) -> dict:
        require_fields(data, ("nombre", "apellido", "email", "rol", "area"))
        require_choice(data.get("rol"), EMPLOYEE_ROLES, "Rol")
        require_choice(data.get("area"), EMPLOYEE_AREAS, "Área")

        def build(new_id: int, records: list[dict]) -> dict:
            return {
                "id": new_id,
                "nombre": clean_str(data.get("nombre")),
                "apellido": clean_str(data.get("apellido")),
                "email": self._check_email(data.get("email"), records),
                "telefono": clean_str(data.get("telefono")),
                "rol": data["rol"],
                "area": data["area"],
                "fechaIngreso": clean_str(data.get("fechaIngreso")) or today_iso(),
                "activo": True,
            }

        return self._append(build)

    def update(self, employee_id: Any, patch: dict) -> dict:
        def prepare(current: dict, changes: dict, records: list[dict]) -> dict:
            if "rol" in changes:
                require_choice(changes["rol"], EMPLOYEE_ROLES, "Rol")
            if "area" in changes:
                require_choice(changes["area"], EMPLOYEE_AREAS, "Área")
            if "activo" in changes:
                changes["activo"] = _as_bool(changes["activo"])
            becomes_active = changes.get("activo", current.get("activo"))
            if "email" in changes or ("activo" in changes and becomes_active):
                email = changes.get("email", current.get("email"))
                if becomes_active:
                    changes["email"] = self._check_email(email, records, exclude_id=current["id"])
                elif not is_valid_email(clean_str(email)):
                    raise ValidationError("Formato de email no válido")
            for field in ("nombre", "apellido"):
                if field in changes and not clean_str(changes[field]):
                    raise ValidationError(f"El campo {field} no puede estar vacío")
            return changes

        return self._merge(employee_id, patch, prepare)

    def delete(self, employee_id: Any, *, hard: bool = False) -> dict:
        """Soft delete by default (`activo=false`); `hard=True` removes the record."""
        if hard:
            return super().delete(employee_id)
        employee = self._set_fields(employee_id, {"activo": False})
        logger.info("Deactivated empleado id=%s", employee["id"])
        return employee


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on", "si", "sí"}
