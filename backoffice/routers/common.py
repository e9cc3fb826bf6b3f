"""Helpers shared by the routers: app-state lookups and the response envelope."""
from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from backoffice.core.errors import ValidationError
from backoffice.repositories.registry import Repositories


def _repos(request: Request) -> Repositories:
    repos = getattr(getattr(request.app, "state", None), "repositories", None)
    if repos:
        return repos
    raise RuntimeError("Repositories not configured")


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def ok(data: Any = None, *, message: Optional[str] = None, status_code: int = 200, **extra: Any) -> JSONResponse:
    """`{success: true, data, message?, total?}`; lists always carry `total`."""
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if isinstance(data, list):
        body["total"] = len(data)
    body.update(extra)
    return JSONResponse(body, status_code=status_code)


def fail(message: str, *, status_code: int, error: Optional[str] = None, **extra: Any) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    body.update(extra)
    return JSONResponse(body, status_code=status_code)


async def read_payload(request: Request) -> dict:
    """Parse the JSON body; a malformed or non-object body is a validation error."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("El body de la solicitud no es un JSON válido")
    if not isinstance(payload, dict):
        raise ValidationError("El body debe ser un objeto JSON")
    return payload
