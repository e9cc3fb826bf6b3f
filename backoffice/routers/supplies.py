from __future__ import annotations

from fastapi import APIRouter, Request

from backoffice.core.errors import ValidationError

from .common import _repos, ok, read_payload

router = APIRouter(prefix="/api/insumos", tags=["insumos"])


@router.get("")
def list_supplies(request: Request):
    return ok(_repos(request).supplies.get_all())


@router.get("/bajo-stock")
def low_stock(request: Request):
    return ok(_repos(request).supplies.get_low_stock())


@router.get("/alertas")
def stock_alerts(request: Request):
    return ok(_repos(request).supplies.alerts())


@router.get("/categoria/{categoria}")
def supplies_by_category(request: Request, categoria: str):
    return ok(_repos(request).supplies.get_by_category(categoria), categoria=categoria)


@router.get("/{supply_id}")
def get_supply(request: Request, supply_id: str):
    return ok(_repos(request).supplies.require(supply_id))


@router.post("")
async def create_supply(request: Request):
    payload = await read_payload(request)
    supply = _repos(request).supplies.create(payload)
    return ok(supply, message="Insumo creado exitosamente", status_code=201)


@router.put("/{supply_id}")
async def update_supply(request: Request, supply_id: str):
    payload = await read_payload(request)
    supply = _repos(request).supplies.update(supply_id, payload)
    return ok(supply, message="Insumo actualizado exitosamente")


@router.patch("/{supply_id}/stock")
async def set_stock(request: Request, supply_id: str):
    payload = await read_payload(request)
    if payload.get("stock") in (None, ""):
        raise ValidationError("El campo stock es obligatorio")
    supply = _repos(request).supplies.set_stock(supply_id, payload["stock"])
    return ok(supply, message="Stock actualizado exitosamente")


@router.post("/{supply_id}/descontar")
async def discount_stock(request: Request, supply_id: str):
    payload = await read_payload(request)
    supply = _repos(request).supplies.discount_stock(supply_id, payload.get("cantidad"))
    return ok(supply, message="Stock descontado exitosamente")


@router.delete("/{supply_id}")
def delete_supply(request: Request, supply_id: str):
    supply = _repos(request).supplies.delete(supply_id)
    return ok(supply, message="Insumo eliminado exitosamente")
