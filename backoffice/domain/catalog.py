"""Domain vocabulary: enumerations, derived fields and format checks."""
from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

EMPLOYEE_ROLES = ("administrador", "cocinero", "repartidor", "mozo", "encargado_stock")
EMPLOYEE_AREAS = ("cocina", "reparto", "salon", "inventario", "administracion")

TASK_AREAS = ("gestion_pedidos", "control_inventario")
TASK_STATUSES = ("pendiente", "en_proceso", "finalizada")
TASK_PRIORITIES = ("alta", "media", "baja")

ORDER_TYPES = ("presencial", "delivery")
ORDER_PLATFORMS = ("rappi", "pedidosya", "propia", "local")
ORDER_STATUSES = ("pendiente", "en_preparacion", "listo", "en_camino", "entregado", "finalizado")

SUPPLY_CATEGORIES = ("alimentos", "bebidas", "limpieza", "utensilios", "otros")
SUPPLY_STATUS_AVAILABLE = "disponible"
SUPPLY_STATUS_LOW = "bajo_stock"
SUPPLY_STATUS_OUT = "sin_stock"

# Legacy category labels folded into the current catalog by the normalizer
CATEGORY_ALIASES = {
    "verduras": "alimentos",
    "vegetales": "alimentos",
    "hortalizas": "alimentos",
    "lacteos": "alimentos",
    "lácteos": "alimentos",
}


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value.strip()))


def supply_status(stock: int | float, minimum: int | float) -> str:
    """Stock status is a pure function of (stock, stockMinimo)."""
    if stock <= 0:
        return SUPPLY_STATUS_OUT
    if stock <= minimum:
        return SUPPLY_STATUS_LOW
    return SUPPLY_STATUS_AVAILABLE


def task_status_rank(status: str | None) -> int:
    try:
        return TASK_STATUSES.index(status or "pendiente")
    except ValueError:
        return 0


def normalize_category(value: str | None) -> str:
    if not value:
        return "otros"
    candidate = str(value).strip().lower()
    if candidate in SUPPLY_CATEGORIES:
        return candidate
    return CATEGORY_ALIASES.get(candidate, "otros")


def choices_message(label: str, choices: tuple[str, ...]) -> str:
    return f"{label} no válido. Use: {', '.join(choices)}"
