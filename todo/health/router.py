"""Health check endpoints."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from todo.db.session import get_db_no_commit
from todo.health.schemas import HealthResponse, ReadinessResponse
from todo.items.models import Item

# Per-check timeout in seconds
HEALTH_CHECK_TIMEOUT = 5.0

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


async def _scalar_check(
    db: AsyncSession, name: str, statement: Executable
) -> tuple[str, int | None]:
    """Run one probe query, returning its status and scalar result."""
    try:
        result = await asyncio.wait_for(
            db.execute(statement), timeout=HEALTH_CHECK_TIMEOUT
        )
    except TimeoutError:
        logger.warning("%s check timed out after %ss", name, HEALTH_CHECK_TIMEOUT)
        return "timeout", None
    except SQLAlchemyError as e:
        logger.warning("%s check failed: %s", name, e)
        return "error", None
    return "ok", result.scalar()


@router.get("/live", response_model=HealthResponse, summary="Liveness probe")
async def liveness() -> HealthResponse:
    """The process is up and serving requests."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Not ready"}},
)
async def readiness(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_no_commit)],
) -> ReadinessResponse:
    """The store answers and the items table exists.

    ``database`` covers connectivity alone, ``items_table`` the schema
    bootstrap. The current item count is reported when the table is readable.
    """
    database, _ = await _scalar_check(db, "database", text("SELECT 1"))
    items_table, item_count = "skipped", None
    if database == "ok":
        items_table, item_count = await _scalar_check(
            db, "items_table", select(func.count(Item.id))
        )

    checks = {"database": database, "items_table": items_table}
    ready = all(v == "ok" for v in checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ok" if ready else "degraded",
        checks=checks,
        item_count=item_count,
    )
