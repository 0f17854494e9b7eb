"""
Liveness and readiness endpoints.

/readyz reports which tables are missing but never the error text or the
database URL.
"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import inspect

from inmoapp.core.database import get_engine, metadata
from inmoapp.core.logging import LOGGER_NAME, latency_bucket_ms

logger = logging.getLogger(LOGGER_NAME)

router = APIRouter(tags=["health"])


class ReadinessReport(BaseModel):
    status: str  # ready | unavailable
    missing_tables: List[str]
    latency_bucket: Optional[str] = None


def _check_readiness() -> ReadinessReport:
    required = sorted(metadata.tables)
    start = time.perf_counter()
    try:
        with get_engine().connect() as conn:
            present = set(inspect(conn).get_table_names())
    except Exception as exc:
        logger.warning("readyz.db_unavailable", extra={"error_type": type(exc).__name__})
        return ReadinessReport(status="unavailable", missing_tables=required)

    missing = [name for name in required if name not in present]
    return ReadinessReport(
        status="unavailable" if missing else "ready",
        missing_tables=missing,
        latency_bucket=latency_bucket_ms((time.perf_counter() - start) * 1000),
    )


@router.get("/healthz")
def healthz():
    return {"status": "ok"}


@router.get("/readyz", response_model=ReadinessReport)
def readyz():
    report = _check_readiness()
    if report.status != "ready":
        return JSONResponse(status_code=503, content=report.model_dump())
    return report
