"""
Configuration helpers for the back-office.

Routers, repositories and scripts read settings through `get_settings()`
instead of fetching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]
STORAGE_BACKENDS = ("json", "sql", "memory")


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    storage_backend: str
    database_url: str
    log_level: str
    cors_origins: tuple[str, ...]

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _origins(value: str | None) -> tuple[str, ...]:
        items = [item.strip() for item in (value or "*").split(",")]
        return tuple(item for item in items if item) or ("*",)

    data_dir = Path(os.getenv("DATA_DIR") or ROOT_DIR / "data").resolve()
    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise RuntimeError(f"Invalid STORAGE_BACKEND {backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=data_dir,
        storage_backend=backend,
        database_url=os.getenv("DATABASE_URL") or f"sqlite:///{data_dir / 'backoffice.db'}",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
    )
