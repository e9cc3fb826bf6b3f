from __future__ import annotations

from fastapi import APIRouter, Request

from .common import _repos, ok, read_payload

router = APIRouter(prefix="/api/tareas", tags=["tareas"])


@router.get("")
def list_tasks(request: Request):
    """Query parameters are filter criteria (estado, prioridad, area, fechaDesde, plataforma...)."""
    criteria = dict(request.query_params)
    tasks = _repos(request).tasks.filter(criteria)
    if criteria:
        return ok(tasks, filtros=criteria)
    return ok(tasks)


@router.get("/area/{area}")
def tasks_by_area(request: Request, area: str):
    return ok(_repos(request).tasks.get_by_area(area), area=area)


@router.get("/{task_id}")
def get_task(request: Request, task_id: str):
    return ok(_repos(request).tasks.require(task_id))


@router.post("")
async def create_task(request: Request):
    payload = await read_payload(request)
    task = _repos(request).tasks.create(payload)
    return ok(task, message="Tarea creada exitosamente", status_code=201)


@router.put("/{task_id}")
async def update_task(request: Request, task_id: str):
    payload = await read_payload(request)
    task = _repos(request).tasks.update(task_id, payload)
    return ok(task, message="Tarea actualizada exitosamente")


@router.patch("/{task_id}/estado")
async def change_task_status(request: Request, task_id: str):
    payload = await read_payload(request)
    task = _repos(request).tasks.transition(task_id, payload.get("estado"))
    return ok(task, message=f"Estado de la tarea actualizado a {task['estado']}")


@router.delete("/{task_id}")
def delete_task(request: Request, task_id: str):
    task = _repos(request).tasks.delete(task_id)
    return ok(task, message="Tarea eliminada exitosamente")
