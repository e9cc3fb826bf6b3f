"""Server-rendered views. Failures propagate to the app's HTML error handler."""
from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from backoffice.core.errors import ValidationError
from backoffice.domain import catalog

from .common import _repos, _templates

router = APIRouter(prefix="", tags=["pages"])

TASK_FIELDS = ("titulo", "descripcion", "area", "prioridad", "empleadoAsignado", "pedidoAsociado", "observaciones")
EMPLOYEE_FIELDS = ("nombre", "apellido", "email", "telefono", "rol", "area", "fechaIngreso")
ORDER_FIELDS = ("clienteId", "cliente", "total", "tipo", "plataforma", "estado", "tiempoEstimado", "observaciones")
SUPPLY_FIELDS = ("nombre", "categoria", "stock", "stockMinimo", "unidadMedida", "proveedor")
CLIENT_FIELDS = ("nombre", "apellido", "email", "telefono")


def parse_items_text(text: str) -> list[dict]:
    """One item per line: `producto; cantidad; precio`."""
    items = []
    for number, line in enumerate((text or "").splitlines(), start=1):
        if not line.strip():
            continue
        parts = [p.strip() for p in line.split(";")]
        if len(parts) != 3:
            raise ValidationError(f"Línea {number} de items inválida. Use: producto; cantidad; precio")
        items.append({"producto": parts[0], "cantidad": parts[1], "precio": parts[2]})
    return items


async def _form(request: Request, fields: Iterable[str], *, drop_blank: Iterable[str] = ()) -> dict:
    form = await request.form()
    data = {field: form.get(field) for field in fields if field in form}
    for field in drop_blank:
        if field in data and not str(data[field]).strip():
            del data[field]
    return data


def _render(request: Request, template: str, page: str, **context):
    return _templates(request).TemplateResponse(
        request, template, {"page": page, "catalog": catalog, **context}
    )


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=303)


@router.get("/")
def index():
    return RedirectResponse("/tareas", status_code=302)


# ---------------------------------------------------------------- tareas
def _employees_by_id(request: Request) -> dict:
    return {e["id"]: e for e in _repos(request).employees.get_all()}


@router.get("/tareas", response_class=HTMLResponse)
def tasks_index(request: Request):
    repos = _repos(request)
    return _render(request, "tareas/index.html", "tareas", tareas=repos.tasks.get_all(), empleados=_employees_by_id(request))


@router.get("/tareas/nueva", response_class=HTMLResponse)
def task_new(request: Request):
    repos = _repos(request)
    return _render(
        request, "tareas/form.html", "tareas",
        tarea=None, empleados=repos.employees.get_active(), pedidos=repos.orders.get_all(),
    )


@router.post("/tareas/nueva")
async def task_create(request: Request):
    _repos(request).tasks.create(await _form(request, TASK_FIELDS))
    return _redirect("/tareas")


@router.get("/tareas/filtrar", response_class=HTMLResponse)
def tasks_filter(request: Request):
    criteria = {k: v for k, v in request.query_params.items() if v and v != "todos"}
    tasks = _repos(request).tasks.filter(criteria)
    return _render(
        request, "tareas/index.html", "tareas", tareas=tasks, empleados=_employees_by_id(request), filtros=criteria
    )


@router.get("/tareas/editar/{task_id}", response_class=HTMLResponse)
def task_edit(request: Request, task_id: str):
    repos = _repos(request)
    return _render(
        request, "tareas/form.html", "tareas",
        tarea=repos.tasks.require(task_id), empleados=repos.employees.get_active(), pedidos=repos.orders.get_all(),
    )


@router.post("/tareas/editar/{task_id}")
async def task_update(request: Request, task_id: str):
    repos = _repos(request)
    current = repos.tasks.require(task_id)
    patch = await _form(request, TASK_FIELDS + ("estado",))
    if patch.get("estado") == current.get("estado"):
        patch.pop("estado")
    repos.tasks.update(task_id, patch)
    return _redirect("/tareas")


@router.post("/tareas/eliminar/{task_id}")
def task_delete(request: Request, task_id: str):
    _repos(request).tasks.delete(task_id)
    return _redirect("/tareas")


@router.get("/filtros", response_class=HTMLResponse)
def filters(request: Request):
    return _render(request, "filtros.html", "filtros", empleados=_repos(request).employees.get_all())


# ---------------------------------------------------------------- empleados
@router.get("/empleados", response_class=HTMLResponse)
def employees_index(request: Request):
    return _render(request, "empleados/index.html", "empleados", empleados=_repos(request).employees.get_all())


@router.get("/empleados/nuevo", response_class=HTMLResponse)
def employee_new(request: Request):
    return _render(request, "empleados/form.html", "empleados", empleado=None)


@router.post("/empleados/nuevo")
async def employee_create(request: Request):
    _repos(request).employees.create(await _form(request, EMPLOYEE_FIELDS))
    return _redirect("/empleados")


@router.get("/empleados/editar/{employee_id}", response_class=HTMLResponse)
def employee_edit(request: Request, employee_id: str):
    employee = _repos(request).employees.require(employee_id)
    return _render(request, "empleados/form.html", "empleados", empleado=employee)


@router.post("/empleados/editar/{employee_id}")
async def employee_update(request: Request, employee_id: str):
    patch = await _form(request, EMPLOYEE_FIELDS, drop_blank=("fechaIngreso",))
    form = await request.form()
    patch["activo"] = "activo" in form
    _repos(request).employees.update(employee_id, patch)
    return _redirect("/empleados")


@router.post("/empleados/eliminar/{employee_id}")
def employee_delete(request: Request, employee_id: str):
    _repos(request).employees.delete(employee_id)
    return _redirect("/empleados")


# ---------------------------------------------------------------- pedidos
async def _order_form(request: Request) -> dict:
    data = await _form(request, ORDER_FIELDS, drop_blank=("total", "estado", "tiempoEstimado"))
    form = await request.form()
    if "itemsText" in form:
        data["items"] = parse_items_text(form.get("itemsText"))
    return data


@router.get("/pedidos", response_class=HTMLResponse)
def orders_index(request: Request):
    orders = _repos(request).orders
    return _render(request, "pedidos/index.html", "pedidos", pedidos=orders.with_client_names(orders.get_all()))


@router.get("/pedidos/nuevo", response_class=HTMLResponse)
def order_new(request: Request):
    return _render(request, "pedidos/form.html", "pedidos", pedido=None, clientes=_repos(request).clients.get_all())


@router.post("/pedidos/nuevo")
async def order_create(request: Request):
    _repos(request).orders.create(await _order_form(request))
    return _redirect("/pedidos")


@router.get("/pedidos/editar/{order_id}", response_class=HTMLResponse)
def order_edit(request: Request, order_id: str):
    repos = _repos(request)
    return _render(
        request, "pedidos/form.html", "pedidos", pedido=repos.orders.require(order_id), clientes=repos.clients.get_all()
    )


@router.post("/pedidos/editar/{order_id}")
async def order_update(request: Request, order_id: str):
    _repos(request).orders.update(order_id, await _order_form(request))
    return _redirect("/pedidos")


@router.post("/pedidos/eliminar/{order_id}")
def order_delete(request: Request, order_id: str):
    _repos(request).orders.delete(order_id)
    return _redirect("/pedidos")


# ---------------------------------------------------------------- insumos
@router.get("/insumos", response_class=HTMLResponse)
def supplies_index(request: Request):
    return _render(request, "insumos/index.html", "insumos", insumos=_repos(request).supplies.get_all())


@router.get("/insumos/nuevo", response_class=HTMLResponse)
def supply_new(request: Request):
    return _render(request, "insumos/form.html", "insumos", insumo=None)


@router.post("/insumos/nuevo")
async def supply_create(request: Request):
    _repos(request).supplies.create(await _form(request, SUPPLY_FIELDS))
    return _redirect("/insumos")


@router.get("/insumos/editar/{supply_id}", response_class=HTMLResponse)
def supply_edit(request: Request, supply_id: str):
    return _render(request, "insumos/form.html", "insumos", insumo=_repos(request).supplies.require(supply_id))


@router.post("/insumos/editar/{supply_id}")
async def supply_update(request: Request, supply_id: str):
    patch = await _form(request, SUPPLY_FIELDS, drop_blank=("stock", "stockMinimo"))
    _repos(request).supplies.update(supply_id, patch)
    return _redirect("/insumos")


@router.post("/insumos/eliminar/{supply_id}")
def supply_delete(request: Request, supply_id: str):
    _repos(request).supplies.delete(supply_id)
    return _redirect("/insumos")


# ---------------------------------------------------------------- clientes
@router.get("/clientes", response_class=HTMLResponse)
def clients_index(request: Request):
    return _render(request, "clientes/index.html", "clientes", clientes=_repos(request).clients.get_all())


@router.get("/clientes/nuevo", response_class=HTMLResponse)
def client_new(request: Request):
    return _render(request, "clientes/form.html", "clientes", cliente=None)


@router.post("/clientes/nuevo")
async def client_create(request: Request):
    _repos(request).clients.create(await _form(request, CLIENT_FIELDS))
    return _redirect("/clientes")


@router.get("/clientes/editar/{client_id}", response_class=HTMLResponse)
def client_edit(request: Request, client_id: str):
    return _render(request, "clientes/form.html", "clientes", cliente=_repos(request).clients.require(client_id))


@router.post("/clientes/editar/{client_id}")
async def client_update(request: Request, client_id: str):
    _repos(request).clients.update(client_id, await _form(request, CLIENT_FIELDS))
    return _redirect("/clientes")


@router.post("/clientes/eliminar/{client_id}")
def client_delete(request: Request, client_id: str):
    _repos(request).clients.delete(client_id)
    return _redirect("/clientes")
