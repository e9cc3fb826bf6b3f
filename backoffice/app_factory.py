"""ASGI entry point: `uvicorn backoffice.app_factory:app`."""
from backoffice.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
