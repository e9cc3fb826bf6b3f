from __future__ import annotations

from fastapi import APIRouter, Request

from backoffice.core.errors import ValidationError

from .common import _repos, ok, read_payload

router = APIRouter(prefix="/api/empleados", tags=["empleados"])


@router.get("")
def list_employees(request: Request):
    return ok(_repos(request).employees.get_all())


@router.get("/activos")
def active_employees(request: Request):
    return ok(_repos(request).employees.get_active())


@router.get("/estadisticas")
def employee_stats(request: Request):
    return ok(_repos(request).employees.stats())


@router.get("/validar-email")
def validate_email(request: Request, email: str = "", id: str = ""):
    if not email.strip():
        raise ValidationError("Email es requerido")
    available = _repos(request).employees.is_email_available(email, id or None)
    return ok(email=email.strip(), disponible=available)


@router.get("/rol/{rol}")
def employees_by_role(request: Request, rol: str):
    return ok(_repos(request).employees.get_by_role(rol), rol=rol)


@router.get("/area/{area}")
def employees_by_area(request: Request, area: str):
    return ok(_repos(request).employees.get_by_area(area), area=area)


@router.get("/{employee_id}")
def get_employee(request: Request, employee_id: str):
    return ok(_repos(request).employees.require(employee_id))


@router.post("")
async def create_employee(request: Request):
    payload = await read_payload(request)
    employee = _repos(request).employees.create(payload)
    return ok(employee, message="Empleado creado exitosamente", status_code=201)


@router.put("/{employee_id}")
async def update_employee(request: Request, employee_id: str):
    payload = await read_payload(request)
    employee = _repos(request).employees.update(employee_id, payload)
    return ok(employee, message="Empleado actualizado exitosamente")


@router.delete("/{employee_id}")
def delete_employee(request: Request, employee_id: str, hard: bool = False):
    employee = _repos(request).employees.delete(employee_id, hard=hard)
    message = "Empleado eliminado exitosamente" if hard else "Empleado desactivado exitosamente"
    return ok(employee, message=message)
