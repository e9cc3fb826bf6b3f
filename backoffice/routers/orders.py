from __future__ import annotations

from fastapi import APIRouter, Request

from .common import _repos, ok, read_payload

router = APIRouter(prefix="/api/pedidos", tags=["pedidos"])


@router.get("")
def list_orders(request: Request):
    orders = _repos(request).orders
    return ok(orders.with_client_names(orders.get_all()))


@router.get("/estadisticas")
def order_stats(request: Request):
    return ok(_repos(request).orders.stats())


@router.get("/tipo/{tipo}")
def orders_by_type(request: Request, tipo: str):
    orders = _repos(request).orders
    return ok(orders.with_client_names(orders.get_by_type(tipo)), tipo=tipo)


@router.get("/plataforma/{plataforma}")
def orders_by_platform(request: Request, plataforma: str):
    orders = _repos(request).orders
    return ok(orders.with_client_names(orders.get_by_platform(plataforma)), plataforma=plataforma)


@router.get("/estado/{estado}")
def orders_by_status(request: Request, estado: str):
    orders = _repos(request).orders
    return ok(orders.with_client_names(orders.get_by_status(estado)), estado=estado)


@router.get("/{order_id}")
def get_order(request: Request, order_id: str):
    orders = _repos(request).orders
    return ok(orders.with_client_names([orders.require(order_id)])[0])


@router.post("")
async def create_order(request: Request):
    payload = await read_payload(request)
    order = _repos(request).orders.create(payload)
    return ok(order, message="Pedido creado exitosamente", status_code=201)


@router.put("/{order_id}")
async def update_order(request: Request, order_id: str):
    payload = await read_payload(request)
    order = _repos(request).orders.update(order_id, payload)
    return ok(order, message="Pedido actualizado exitosamente")


@router.delete("/{order_id}")
def delete_order(request: Request, order_id: str):
    order = _repos(request).orders.delete(order_id)
    return ok(order, message="Pedido eliminado exitosamente")
