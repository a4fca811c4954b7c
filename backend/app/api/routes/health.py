from __future__ import annotations

from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import inspect, text

from app.db.session import engine

router = APIRouter()
logger = logging.getLogger(__name__)

REQUIRED_TABLES = {"users", "exams", "notifications", "offline_pending_changes", "activity_logs"}


@router.get("/health")
def health() -> dict:
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    db_ok = True
    db_error: str | None = None
    missing_tables: list[str] = []

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            table_names = set(inspect(connection).get_table_names())
            missing_tables = sorted(REQUIRED_TABLES - table_names)
    except Exception as exc:  # pragma: no cover - environment dependent
        logger.warning("Readiness probe could not reach the database", exc_info=True)
        db_ok = False
        db_error = type(exc).__name__

    ready = db_ok and not missing_tables
    payload = {
        "status": "ok" if ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": {"ok": db_ok, "missing_tables": missing_tables, "error": db_error},
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
