from __future__ import annotations

from fastapi import APIRouter, Request

from backoffice.core.errors import ValidationError

from .common import _repos, ok, read_payload

router = APIRouter(prefix="/api/clientes", tags=["clientes"])


@router.get("")
def list_clients(request: Request):
    return ok(_repos(request).clients.get_all())


@router.get("/buscar")
def search_clients(request: Request, nombre: str = "", apellido: str = ""):
    return ok(_repos(request).clients.search(nombre, apellido))


@router.get("/validar-email")
def validate_email(request: Request, email: str = "", id: str = ""):
    if not email.strip():
        raise ValidationError("Email es requerido")
    available = _repos(request).clients.is_email_available(email, id or None)
    return ok(email=email.strip(), disponible=available)


@router.get("/{client_id}")
def get_client(request: Request, client_id: str):
    return ok(_repos(request).clients.require(client_id))


@router.post("")
async def create_client(request: Request):
    payload = await read_payload(request)
    client = _repos(request).clients.create(payload)
    return ok(client, message="Cliente creado exitosamente", status_code=201)


@router.put("/{client_id}")
async def update_client(request: Request, client_id: str):
    payload = await read_payload(request)
    client = _repos(request).clients.update(client_id, payload)
    return ok(client, message="Cliente actualizado exitosamente")


@router.delete("/{client_id}")
def delete_client(request: Request, client_id: str):
    client = _repos(request).clients.delete(client_id)
    return ok(client, message="Cliente eliminado exitosamente")
