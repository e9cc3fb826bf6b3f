"""Typed failures raised by repositories and mapped to HTTP responses."""
from __future__ import annotations


class BackofficeError(Exception):
    """Base class carrying the message shown to clients and the HTTP status."""

    status_code = 500
    code = "error"

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BackofficeError):
    """Missing or malformed input."""

    status_code = 400
    code = "validation"


class NotFoundError(BackofficeError):
    status_code = 404
    code = "not_found"


class ConflictError(BackofficeError):
    """Unique constraint violated (duplicate email)."""

    status_code = 409
    code = "conflict"


class InsufficientStockError(BackofficeError):
    status_code = 400
    code = "insufficient_stock"


class StorageError(BackofficeError):
    """Backing file or database could not be read or written."""

    status_code = 500
    code = "storage"
