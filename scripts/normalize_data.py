#!/usr/bin/env python3
"""
Normalize legacy data files (categories, numeric fields, dangling task references).

Idempotent, but writes a timestamped backup of every file on each run.

Uso:
  python scripts/normalize_data.py [--data-dir data/]
"""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Make the backoffice package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backoffice.core.config import get_settings
from backoffice.core.errors import StorageError
from backoffice.core.logging_config import setup_logging
from backoffice.services.normalization import normalize_data_dir


def main() -> None:
    ap = argparse.ArgumentParser(description="Normalize the back-office JSON data files")
    ap.add_argument("--data-dir", help="Data directory (default: DATA_DIR or ./data)")
    args = ap.parse_args()

    settings = get_settings()
    logger = setup_logging(settings.log_level)
    data_dir = Path(args.data_dir).resolve() if args.data_dir else settings.data_dir
    if not data_dir.is_dir():
        raise SystemExit(f"Data directory not found: {data_dir}")
    try:
        counts = normalize_data_dir(data_dir)
    except StorageError as exc:
        raise SystemExit(f"Normalization failed: {exc.message}") from exc
    for key, modified in counts.items():
        logger.info("%s: %s record(s) modified", key, modified)
    print("Normalization completed.")


if __name__ == "__main__":
    main()
