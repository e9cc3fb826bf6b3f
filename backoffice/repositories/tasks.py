"""Task repository: status lifecycle and the cross-entity task filter."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from backoffice.core.errors import NotFoundError, ValidationError
from backoffice.core.utils import clean_str, coerce_id, now_iso, optional_ref, parse_filter_date, parse_timestamp
from backoffice.domain.catalog import TASK_AREAS, TASK_PRIORITIES, TASK_STATUSES, task_status_rank

from .base import EntityRepository, require_choice, require_fields
from .employees import EmployeeRepository
from .json_storage import RecordStore
from .orders import OrderRepository

# (criteria start key, criteria end key, task timestamp field)
DATE_RANGES = (
    ("fechaDesde", "fechaHasta", "fechaCreacion"),
    ("inicioDesde", "inicioHasta", "fechaInicio"),
    ("finDesde", "finHasta", "fechaFinalizacion"),
)
ALL = "todos"


def _in_range(value: Any, start: Optional[datetime], end: Optional[datetime]) -> bool:
    moment = parse_timestamp(value)
    if moment is None:
        return False
    if start and moment < start:
        return False
    if end and moment > end:
        return False
    return True


class TaskRepository(EntityRepository):
    label = "tarea"
    not_found_message = "Tarea no encontrada"
    mutable_fields = (
        "titulo",
        "descripcion",
        "area",
        "estado",
        "prioridad",
        "empleadoAsignado",
        "pedidoAsociado",
        "observaciones",
    )

    def __init__(
        self,
        store: RecordStore,
        employees: Optional[EmployeeRepository] = None,
        orders: Optional[OrderRepository] = None,
    ) -> None:
        super().__init__(store)
        self.employees = employees
        self.orders = orders

    # -------------------------- queries --------------------------
    def get_by_status(self, estado: str) -> list[dict]:
        require_choice(estado, TASK_STATUSES, "Estado")
        return self.filter_by("estado", estado)

    def get_by_area(self, area: str) -> list[dict]:
        require_choice(area, TASK_AREAS, "Área")
        return self.filter_by("area", area)

    def get_by_employee(self, employee_id: Any) -> list[dict]:
        return self.filter_by("empleadoAsignado", coerce_id(employee_id, "empleadoAsignado"))

    def filter(self, criteria: Mapping[str, Any] | None = None) -> list[dict]:
        """
        Apply every given criterion (AND). Order type/platform criteria keep
        tasks without an associated order plus those whose order matches.
        """
        criteria = {k: v for k, v in (criteria or {}).items() if v not in (None, "")}
        ranges = []
        for start_key, end_key, field in DATE_RANGES:
            start = parse_filter_date(criteria.get(start_key), start_key)
            end = parse_filter_date(criteria.get(end_key), end_key, end_of_day=True)
            if start and end and start > end:
                raise ValidationError(f"{start_key} debe ser menor que {end_key}")
            if start or end:
                ranges.append((field, start, end))

        tasks = self.get_all()
        for field in ("estado", "prioridad", "area"):
            if field in criteria:
                tasks = [t for t in tasks if t.get(field) == criteria[field]]
        if "empleadoAsignado" in criteria:
            employee_id = coerce_id(criteria["empleadoAsignado"], "empleadoAsignado")
            tasks = [t for t in tasks if t.get("empleadoAsignado") == employee_id]
        for field, start, end in ranges:
            tasks = [t for t in tasks if _in_range(t.get(field), start, end)]

        order_filters = {
            field: criteria[key]
            for key, field in (("tipoPedido", "tipo"), ("plataforma", "plataforma"))
            if criteria.get(key) not in (None, ALL)
        }
        if order_filters and self.orders is not None:
            orders = self.orders.get_all()
            for field, value in order_filters.items():
                orders = [o for o in orders if o.get(field) == value]
            order_ids = {o.get("id") for o in orders}
            tasks = [t for t in tasks if t.get("pedidoAsociado") is None or t.get("pedidoAsociado") in order_ids]
        return tasks

    # -------------------------- mutations --------------------------
    def _check_refs(self, changes: dict) -> dict:
        if "empleadoAsignado" in changes:
            employee_id = optional_ref(changes["empleadoAsignado"], "empleadoAsignado")
            if employee_id is not None and self.employees is not None and self.employees.get_by_id(employee_id) is None:
                raise NotFoundError("Empleado no encontrado")
            changes["empleadoAsignado"] = employee_id
        if "pedidoAsociado" in changes:
            order_id = optional_ref(changes["pedidoAsociado"], "pedidoAsociado")
            if order_id is not None and self.orders is not None and self.orders.get_by_id(order_id) is None:
                raise NotFoundError("Pedido no encontrado")
            changes["pedidoAsociado"] = order_id
        return changes

    def create(self, data: dict) -> dict:
        require_fields(data, ("titulo", "area"))
        require_choice(data.get("area"), TASK_AREAS, "Área")
        priority = data.get("prioridad") or "media"
        require_choice(priority, TASK_PRIORITIES, "Prioridad")
        refs = self._check_refs(
            {"empleadoAsignado": data.get("empleadoAsignado"), "pedidoAsociado": data.get("pedidoAsociado")}
        )

        def build(new_id: int, records: list[dict]) -> dict:
            return {
                "id": new_id,
                "titulo": clean_str(data.get("titulo")),
                "descripcion": clean_str(data.get("descripcion")),
                "area": data["area"],
                "estado": "pendiente",
                "prioridad": priority,
                "empleadoAsignado": refs["empleadoAsignado"],
                "pedidoAsociado": refs["pedidoAsociado"],
                "fechaCreacion": now_iso(),
                "fechaInicio": None,
                "fechaFinalizacion": None,
                "observaciones": clean_str(data.get("observaciones")),
            }

        return self._append(build)

    def update(self, task_id: Any, patch: dict) -> dict:
        def prepare(current: dict, changes: dict, records: list[dict]) -> dict:
            if "titulo" in changes and not clean_str(changes["titulo"]):
                raise ValidationError("El campo titulo no puede estar vacío")
            if "area" in changes:
                require_choice(changes["area"], TASK_AREAS, "Área")
            if "prioridad" in changes:
                require_choice(changes["prioridad"], TASK_PRIORITIES, "Prioridad")
            if "estado" in changes:
                changes.update(_status_change(current, changes["estado"]))
            return self._check_refs(changes)

        return self._merge(task_id, patch, prepare)

    def transition(self, task_id: Any, estado: Any) -> dict:
        if not estado:
            raise ValidationError("El campo estado es obligatorio")
        return self.update(task_id, {"estado": estado})


def _status_change(current: dict, target: Any) -> dict:
    """
    Status only moves forward. fechaInicio/fechaFinalizacion are stamped the
    first time the task reaches each state and never rewritten.
    """
    require_choice(target, TASK_STATUSES, "Estado")
    previous = current.get("estado") or "pendiente"
    if task_status_rank(target) < task_status_rank(previous):
        raise ValidationError(f"Transición de estado no permitida: {previous} -> {target}")
    changes: dict = {"estado": target}
    stamp = now_iso()
    if target in ("en_proceso", "finalizada") and not current.get("fechaInicio"):
        changes["fechaInicio"] = stamp
    if target == "finalizada" and not current.get("fechaFinalizacion"):
        changes["fechaFinalizacion"] = stamp
    return changes
