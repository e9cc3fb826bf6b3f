"""Supply (stock item) repository with the derived stock status."""
from __future__ import annotations

from typing import Any

from backoffice.core.errors import InsufficientStockError, NotFoundError, ValidationError
from backoffice.core.logging_config import get_logger
from backoffice.core.utils import clean_str, coerce_id, now_iso, to_non_negative_int
from backoffice.domain.catalog import SUPPLY_CATEGORIES, supply_status

from .base import EntityRepository, find_index, require_choice, require_fields

logger = get_logger(__name__)

DEFAULT_MINIMUM = 5


def _positive_quantity(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("La cantidad debe ser un número mayor a 0")
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("La cantidad debe ser un número mayor a 0")
    if number <= 0 or not number.is_integer():
        raise ValidationError("La cantidad debe ser un número mayor a 0")
    return int(number)


class SupplyRepository(EntityRepository):
    label = "insumo"
    not_found_message = "Insumo no encontrado"
    mutable_fields = ("nombre", "categoria", "stock", "stockMinimo", "unidadMedida", "proveedor")

    def get_by_category(self, categoria: str) -> list[dict]:
        require_choice(categoria, SUPPLY_CATEGORIES, "Categoría")
        return self.filter_by("categoria", categoria)

    def get_low_stock(self) -> list[dict]:
        return [s for s in self.get_all() if (s.get("stock") or 0) <= (s.get("stockMinimo") or 0)]

    def alerts(self) -> list[dict]:
        return [
            {
                "id": s.get("id"),
                "nombre": s.get("nombre"),
                "stockActual": s.get("stock"),
                "stockMinimo": s.get("stockMinimo"),
                "estado": s.get("estado"),
                "proveedor": s.get("proveedor"),
            }
            for s in self.get_low_stock()
        ]

    def create(self, data: dict) -> dict:
        require_fields(data, ("nombre", "categoria"))
        require_choice(data.get("categoria"), SUPPLY_CATEGORIES, "Categoría")
        stock = to_non_negative_int(data.get("stock") if data.get("stock") not in (None, "") else 0, "stock")
        minimum = data.get("stockMinimo")
        minimum = to_non_negative_int(minimum, "stockMinimo") if minimum not in (None, "") else DEFAULT_MINIMUM

        def build(new_id: int, records: list[dict]) -> dict:
            return {
                "id": new_id,
                "nombre": clean_str(data.get("nombre")),
                "categoria": data["categoria"],
                "stock": stock,
                "stockMinimo": minimum,
                "unidadMedida": clean_str(data.get("unidadMedida")),
                "proveedor": clean_str(data.get("proveedor")),
                "ultimaActualizacion": now_iso(),
                "estado": supply_status(stock, minimum),
            }

        return self._append(build)

    def update(self, supply_id: Any, patch: dict) -> dict:
        def prepare(current: dict, changes: dict, records: list[dict]) -> dict:
            if "categoria" in changes:
                require_choice(changes["categoria"], SUPPLY_CATEGORIES, "Categoría")
            if "nombre" in changes and not clean_str(changes["nombre"]):
                raise ValidationError("El campo nombre no puede estar vacío")
            for field in ("stock", "stockMinimo"):
                if field in changes:
                    changes[field] = to_non_negative_int(changes[field], field)
            if "stock" in changes or "stockMinimo" in changes:
                stock = changes.get("stock", current.get("stock") or 0)
                minimum = changes.get("stockMinimo", current.get("stockMinimo") or 0)
                changes["estado"] = supply_status(stock, minimum)
                changes["ultimaActualizacion"] = now_iso()
            return changes

        return self._merge(supply_id, patch, prepare)

    def set_stock(self, supply_id: Any, stock: Any) -> dict:
        value = to_non_negative_int(stock, "stock")
        rid = coerce_id(supply_id)
        with self.store.locked():
            records = self.store.load()
            index = find_index(records, rid)
            if index == -1:
                raise NotFoundError(self.not_found_message)
            records[index] = self._with_stock(records[index], value)
            self.store.save_all(records)
        logger.info("Stock of insumo id=%s set to %s", rid, value)
        return records[index]

    def discount_stock(self, supply_id: Any, quantity: Any) -> dict:
        """Subtract `quantity`; fails without touching the store when stock would go negative."""
        amount = _positive_quantity(quantity)
        rid = coerce_id(supply_id)
        with self.store.locked():
            records = self.store.load()
            index = find_index(records, rid)
            if index == -1:
                raise NotFoundError(self.not_found_message)
            remaining = int(records[index].get("stock") or 0) - amount
            if remaining < 0:
                raise InsufficientStockError("Stock insuficiente")
            records[index] = self._with_stock(records[index], remaining)
            self.store.save_all(records)
        logger.info("Discounted %s from insumo id=%s (remaining %s)", amount, rid, remaining)
        return records[index]

    @staticmethod
    def _with_stock(record: dict, stock: int) -> dict:
        return {
            **record,
            "stock": stock,
            "estado": supply_status(stock, record.get("stockMinimo") or 0),
            "ultimaActualizacion": now_iso(),
        }
