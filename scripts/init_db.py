"""Create the FaceSync tables (idempotent) in the database of the current APP_ENV."""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module, load_settings

from src.facesync.facesync.database.bootstrap import apply_schema, list_tables

SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"


def main() -> int:
    load_dotenv(override=False)
    settings = load_settings()
    if getattr(settings, "STORAGE_BACKEND", "mysql") != "mysql":
        print(f"{get_settings_module()} uses STORAGE_BACKEND={settings.STORAGE_BACKEND}; nothing to initialise")
        return 1

    db_config = dict(settings.DB_CONFIG)
    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    print(f"Schema applied to {db_config.get('database')}@{db_config.get('host')}: {', '.join(sorted(tables))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
