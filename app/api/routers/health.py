"""
Health checks del servicio de bookings.

- /health, /health/live: el proceso responde.
- /health/db: conectividad con la base; se omite con repositorios en memoria.
- /health/ready: almacenamiento activo y worker del outbox (si está habilitado).
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_session
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "bookings-api"


def _storage(settings: Settings) -> str:
    return "in_memory" if settings.use_in_memory else "sql"


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database ping failed")
        return False
    return True


@router.get("/health")
@router.get("/health/live")
async def health_check(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "service": SERVICE_NAME, "storage": _storage(settings)}


@router.get("/health/db")
async def health_check_db(session: AsyncSession | None = Depends(get_session)):
    if session is None:
        return {"status": "skipped", "component": "database", "storage": "in_memory"}

    if await _database_reachable(session):
        return {"status": "healthy", "component": "database", "storage": "sql"}
    return JSONResponse(
        status_code=503,
        content={
            "status": "unhealthy",
            "component": "database",
            "error": "Database connection failed",
        },
    )


@router.get("/health/ready")
async def health_check_ready(
    request: Request,
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    """
    Listo para recibir tráfico cuando el almacenamiento activo responde y,
    con el worker habilitado, el loop del outbox está corriendo.
    """
    checks = {"storage": _storage(settings)}
    ready = True

    if session is not None:
        reachable = await _database_reachable(session)
        checks["database"] = "healthy" if reachable else "unhealthy"
        ready = ready and reachable

    if settings.outbox_worker_enabled:
        worker = getattr(request.app.state, "outbox_worker", None)
        running = worker is not None and worker.is_running
        checks["outbox_worker"] = "running" if running else "stopped"
        ready = ready and running
    else:
        checks["outbox_worker"] = "disabled"

    body = {"status": "ready" if ready else "not_ready", "checks": checks}
    if not ready:
        logger.warning("Readiness check failed", extra={"checks": checks})
        return JSONResponse(status_code=503, content=body)
    return body
