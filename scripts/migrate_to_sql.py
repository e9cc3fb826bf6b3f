"""One-off migration script: per-entity JSON files -> SQL `records` table."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Make the backoffice package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.exc import SQLAlchemyError

from backoffice.core.config import get_settings
from backoffice.core.errors import StorageError
from backoffice.core.logging_config import setup_logging
from backoffice.db.create_tables import create_all
from backoffice.repositories.json_storage import JsonFileStore
from backoffice.repositories.registry import ENTITY_FILES
from backoffice.repositories.sql_repository import SqlRecordStore


def migrate(data_dir: Path, database_url: str | None = None) -> dict[str, int]:
    create_all(database_url)
    copied = {}
    for key, filename in ENTITY_FILES.items():
        records = JsonFileStore(data_dir / filename, key).load()
        SqlRecordStore(key, database_url).save_all(records)
        copied[key] = len(records)
    return copied


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy JSON data files into the SQL backend (DATABASE_URL)")
    ap.add_argument("--data-dir", help="Data directory (default: DATA_DIR or ./data)")
    args = ap.parse_args()

    settings = get_settings()
    logger = setup_logging(settings.log_level)
    data_dir = Path(args.data_dir).resolve() if args.data_dir else settings.data_dir
    try:
        copied = migrate(data_dir, settings.database_url)
    except (StorageError, SQLAlchemyError) as exc:
        raise SystemExit(f"Migration failed: {exc}") from exc
    for key, total in copied.items():
        logger.info("%s: %s record(s) copied", key, total)
    print("Migration completed.")


if __name__ == "__main__":
    main()
