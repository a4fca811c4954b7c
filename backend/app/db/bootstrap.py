from __future__ import annotations

import logging

from sqlalchemy import inspect, text

from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

# Columns added after the first release; older SQLite files are patched in place.
ADDITIVE_COLUMNS: dict[str, dict[str, str]] = {
    "exams": {
        "status": "VARCHAR(20) NOT NULL DEFAULT 'upcoming'",
        "updated_at": "DATETIME",
    },
    "offline_pending_changes": {
        "device_id": "VARCHAR(100)",
    },
}


def _ensure_additive_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        for table_name, columns in ADDITIVE_COLUMNS.items():
            if table_name not in table_names:
                continue
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name, ddl in columns.items():
                if column_name in existing:
                    continue
                logger.info("Adding missing column %s.%s", table_name, column_name)
                connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))


def ensure_runtime_schema_compatibility() -> None:
    import app.models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        _ensure_additive_columns()
    except Exception as exc:
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
