import logging
import os
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from backoffice.core.config import Settings, get_settings
from backoffice.core.errors import BackofficeError
from backoffice.core.logging_config import get_logger, setup_logging
from backoffice.repositories.registry import Repositories, build_repositories
from backoffice.routers import clients as clients_router
from backoffice.routers import employees as employees_router
from backoffice.routers import orders as orders_router
from backoffice.routers import pages as pages_router
from backoffice.routers import supplies as supplies_router
from backoffice.routers import tasks as tasks_router
from backoffice.routers.common import fail

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "..", "web")
TEMPLATES = os.path.join(BASE, "..", "templates")

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, client and timing; write bodies at DEBUG."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        client = request.client.host if request.client else "-"
        if request.method in ("POST", "PUT", "PATCH") and logger.isEnabledFor(logging.DEBUG):
            body = await request.body()
            logger.debug("%s %s body=%s", request.method, request.url.path, body.decode("utf-8", "replace")[:2000])
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s from %s -> %s (%.1f ms)", request.method, request.url.path, client, response.status_code, elapsed
        )
        return response


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _error_page(request: Request, message: str, status_code: int):
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request, "error.html", {"page": "", "error": message, "code": status_code}, status_code=status_code
    )


def _install_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(BackofficeError)
    async def backoffice_error(request: Request, exc: BackofficeError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        if _is_api(request):
            return fail(exc.message, status_code=exc.status_code, error=exc.code, **exc.details)
        return _error_page(request, exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        if _is_api(request):
            return fail("Parámetros de la solicitud inválidos", status_code=400, error="validation", errores=exc.errors())
        return _error_page(request, "Parámetros de la solicitud inválidos", 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = "Página no encontrada" if exc.status_code == 404 else str(exc.detail)
        if _is_api(request):
            return fail(message if exc.status_code != 404 else "Recurso no encontrado", status_code=exc.status_code)
        return _error_page(request, message, exc.status_code)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = str(exc) if settings.is_dev else "Contacte al administrador"
        if _is_api(request):
            return fail("Error interno del servidor", status_code=500, error=detail)
        return _error_page(request, "Error del servidor", 500)


def create_app(settings: Optional[Settings] = None, repositories: Optional[Repositories] = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (`uvicorn backoffice.app:create_app --factory`)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Restaurant Back-office API")
    app.state.settings = settings
    app.state.repositories = repositories or build_repositories(settings)
    app.state.templates = Jinja2Templates(directory=TEMPLATES)

    if os.path.isdir(WEB):
        app.mount("/static", StaticFiles(directory=WEB), name="static")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    _install_error_handlers(app, settings)

    app.include_router(employees_router.router)
    app.include_router(tasks_router.router)
    app.include_router(orders_router.router)
    app.include_router(supplies_router.router)
    app.include_router(clients_router.router)
    app.include_router(pages_router.router)

    logger.info("Back-office app ready (env=%s, storage=%s)", settings.app_env, settings.storage_backend)
    return app
