from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_use_cases
from app.api.schemas.common import ApiResponse
from app.api.schemas.workers import OutboxRunResponse
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()


@router.post(
    "/workers/outbox/notifications",
    response_model=ApiResponse[OutboxRunResponse],
    status_code=status.HTTP_200_OK,
)
async def dispatch_pending_notifications(
    use_cases: Annotated[dict, Depends(get_use_cases)],
    limit: int = Query(default=20, ge=1, le=500),
    worker_id: str | None = Query(default=None, alias="worker-id"),
) -> ApiResponse[OutboxRunResponse]:
    """
    Drain pending notification events (new and scheduled retries).

    Safe to run concurrently with the polling worker: claims use row locks.
    """

    async def execute_dispatch():
        return await use_cases["dispatch_notifications"].execute(
            limit=limit, worker_id=worker_id or "http-worker"
        )

    run = await retry_on_deadlock(execute_dispatch, max_attempts=3, base_delay=0.1)
    return ApiResponse(
        message="Outbox processed",
        data=OutboxRunResponse(
            claimed=run.claimed,
            done=run.done,
            retried=run.retried,
            failed=run.failed,
        ),
    )
