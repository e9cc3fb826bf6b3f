"""Order repository."""
from __future__ import annotations

from typing import Any, Optional

from backoffice.core.errors import NotFoundError, ValidationError
from backoffice.core.utils import clean_str, now_iso, optional_ref, to_non_negative_number, to_number
from backoffice.domain.catalog import ORDER_PLATFORMS, ORDER_STATUSES, ORDER_TYPES

from .base import EntityRepository, require_choice
from .clients import ClientRepository
from .json_storage import RecordStore

DEFAULT_ESTIMATED_MINUTES = 30


def normalize_items(items: Any) -> list[dict]:
    if not isinstance(items, list) or not items:
        raise ValidationError("El pedido debe incluir al menos un item")
    normalized = []
    for item in items:
        if not isinstance(item, dict) or not clean_str(item.get("producto")):
            raise ValidationError("Cada item debe indicar producto, cantidad y precio")
        quantity = to_non_negative_number(item.get("cantidad"), "cantidad")
        price = to_non_negative_number(item.get("precio"), "precio")
        if quantity <= 0:
            raise ValidationError("La cantidad de cada item debe ser mayor a 0")
        normalized.append({"producto": clean_str(item["producto"]), "cantidad": quantity, "precio": price})
    return normalized


def items_total(items: list[dict]) -> float | int:
    return to_number(round(sum(i["cantidad"] * i["precio"] for i in items), 2))


class OrderRepository(EntityRepository):
    label = "pedido"
    not_found_message = "Pedido no encontrado"
    mutable_fields = (
        "clienteId",
        "cliente",
        "items",
        "total",
        "tipo",
        "plataforma",
        "estado",
        "tiempoEstimado",
        "observaciones",
    )

    def __init__(self, store: RecordStore, clients: Optional[ClientRepository] = None) -> None:
        super().__init__(store)
        self.clients = clients

    # -------------------------- queries --------------------------
    def get_by_type(self, tipo: str) -> list[dict]:
        require_choice(tipo, ORDER_TYPES, "Tipo")
        return self.filter_by("tipo", tipo)

    def get_by_platform(self, plataforma: str) -> list[dict]:
        require_choice(plataforma, ORDER_PLATFORMS, "Plataforma")
        return self.filter_by("plataforma", plataforma)

    def get_by_status(self, estado: str) -> list[dict]:
        require_choice(estado, ORDER_STATUSES, "Estado")
        return self.filter_by("estado", estado)

    def stats(self) -> dict:
        orders = self.get_all()

        def count(field: str, values: tuple[str, ...]) -> dict:
            return {value: sum(1 for o in orders if o.get(field) == value) for value in values}

        return {
            "total": len(orders),
            "porTipo": count("tipo", ORDER_TYPES),
            "porPlataforma": count("plataforma", ORDER_PLATFORMS),
            "porEstado": count("estado", ORDER_STATUSES),
        }

    def with_client_names(self, orders: list[dict]) -> list[dict]:
        """Add `clienteNombre`: the referenced client's full name, or the legacy inline string."""
        directory = {c.get("id"): c for c in self.clients.get_all()} if self.clients else {}
        enriched = []
        for order in orders:
            client = directory.get(order.get("clienteId"))
            name = ClientRepository.display_name(client) if client else clean_str(order.get("cliente"))
            enriched.append({**order, "clienteNombre": name})
        return enriched

    # -------------------------- mutations --------------------------
    def _check_client(self, client_id: Any) -> Optional[int]:
        cid = optional_ref(client_id, "clienteId")
        if cid is not None and self.clients is not None and self.clients.get_by_id(cid) is None:
            raise NotFoundError("Cliente no encontrado")
        return cid

    def create(self, data: dict) -> dict:
        client_id = self._check_client(data.get("clienteId"))
        legacy_client = clean_str(data.get("cliente"))
        if client_id is None and not legacy_client:
            raise ValidationError("Cliente, items, tipo y plataforma son obligatorios")
        items = normalize_items(data.get("items"))
        require_choice(data.get("tipo"), ORDER_TYPES, "Tipo")
        require_choice(data.get("plataforma"), ORDER_PLATFORMS, "Plataforma")
        status = data.get("estado") or "pendiente"
        require_choice(status, ORDER_STATUSES, "Estado")
        total = data.get("total")
        total = to_non_negative_number(total, "total") if total not in (None, "") else items_total(items)
        minutes = data.get("tiempoEstimado")
        minutes = (
            to_non_negative_number(minutes, "tiempoEstimado") if minutes not in (None, "") else DEFAULT_ESTIMATED_MINUTES
        )

        def build(new_id: int, records: list[dict]) -> dict:
            stamp = now_iso()
            return {
                "id": new_id,
                "numeroOrden": clean_str(data.get("numeroOrden")) or f"ORD-{new_id:03d}",
                "clienteId": client_id,
                "cliente": legacy_client,
                "items": items,
                "total": total,
                "tipo": data["tipo"],
                "plataforma": data["plataforma"],
                "estado": status,
                "fechaCreacion": stamp,
                "fechaActualizacion": stamp,
                "tiempoEstimado": minutes,
                "observaciones": clean_str(data.get("observaciones")),
            }

        return self._append(build)

    def update(self, order_id: Any, patch: dict) -> dict:
        def prepare(current: dict, changes: dict, records: list[dict]) -> dict:
            if "clienteId" in changes:
                changes["clienteId"] = self._check_client(changes["clienteId"])
            if "items" in changes:
                changes["items"] = normalize_items(changes["items"])
                if "total" not in changes:
                    changes["total"] = items_total(changes["items"])
            if "total" in changes:
                changes["total"] = to_non_negative_number(changes["total"], "total")
            if "tipo" in changes:
                require_choice(changes["tipo"], ORDER_TYPES, "Tipo")
            if "plataforma" in changes:
                require_choice(changes["plataforma"], ORDER_PLATFORMS, "Plataforma")
            if "estado" in changes:
                require_choice(changes["estado"], ORDER_STATUSES, "Estado")
            if "tiempoEstimado" in changes:
                changes["tiempoEstimado"] = to_non_negative_number(changes["tiempoEstimado"], "tiempoEstimado")
            changes["fechaActualizacion"] = now_iso()
            return changes

        return self._merge(order_id, patch, prepare)
