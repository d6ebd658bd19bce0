import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.dependencies import dispatcher_scope
from app.api.deps import engine
from app.api.routers.accounts import router as accounts_router
from app.api.routers.bookings import router as bookings_router
from app.api.routers.health import router as health_router
from app.api.routers.notifications import router as notifications_router
from app.api.routers.webhooks import router as webhooks_router
from app.api.routers.worker import router as worker_router
from app.api.schemas.common import error_envelope
from app.config import get_settings
from app.domain.errors import DomainError
from app.infrastructure.db.tables import metadata
from app.infrastructure.messaging.outbox_worker import OutboxWorker

settings = get_settings()

# Configure structured logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB tables (for dev/demo purposes)
    if not settings.use_in_memory:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    worker = None
    if settings.outbox_worker_enabled:
        worker = OutboxWorker(
            dispatcher_factory=dispatcher_scope,
            poll_interval_seconds=settings.outbox_poll_interval_seconds,
            batch_size=settings.outbox_batch_size,
        )
        worker.start()
    app.state.outbox_worker = worker
    yield
    # Cleanup
    if worker:
        await worker.stop()
    await engine.dispose()

app = FastAPI(
    title="Bookings API",
    version="0.1.0",
    lifespan=lifespan
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "Request rejected: %s",
        exc.code,
        extra={"error_code": exc.code, "path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.code, exc.message),
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    # Log the full error with context for internal debugging
    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content=error_envelope(
            "INTERNAL_ERROR",
            "An unexpected error occurred. Please contact support with the error_id if the issue persists.",
            error_id=error_id,
        ),
    )


app.include_router(health_router, tags=["Health"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
app.include_router(accounts_router, prefix="/api/v1", tags=["Accounts"])
app.include_router(notifications_router, prefix="/api/v1", tags=["Notifications"])
app.include_router(webhooks_router, prefix="/api/v1", tags=["Webhooks"])
app.include_router(worker_router, prefix="/api/v1", tags=["Worker"])
