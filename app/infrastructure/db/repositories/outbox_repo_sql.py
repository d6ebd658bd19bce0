import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy import insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.clock import SystemClock
from app.application.interfaces.outbox_repo import OutboxRepo
from app.domain.entities.outbox_event import OutboxEvent, OutboxEventType, OutboxStatus
from app.infrastructure.db.tables import outbox_events

logger = logging.getLogger(__name__)
_clock = SystemClock()


def _row_to_event(data) -> OutboxEvent:
    return OutboxEvent(
        id=data["id"],
        event_type=OutboxEventType(data["event_type"]),
        aggregate_type=data["aggregate_type"],
        aggregate_code=data["aggregate_code"],
        payload=data["payload"] or {},
        status=OutboxStatus(data["status"]),
        attempts=data["attempts"] or 0,
        next_attempt_at=data["next_attempt_at"],
        locked_by=data["locked_by"],
        lock_expires_at=data["lock_expires_at"],
        error_code=data["error_code"],
        error_message=data["error_message"],
        created_at=data["created_at"],
        updated_at=data["updated_at"],
    )


class OutboxRepoSQL(OutboxRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def enqueue(self, event: OutboxEvent) -> OutboxEvent:
        now = event.created_at or _clock.now()
        stmt = insert(outbox_events).values(
            event_type=str(getattr(event.event_type, "value", event.event_type)),
            aggregate_type=event.aggregate_type,
            aggregate_code=event.aggregate_code,
            payload=event.payload,
            status=OutboxStatus.NEW.value,
            attempts=0,
            next_attempt_at=now,
            created_at=now,
            updated_at=now,
        )
        result = await self._session.execute(stmt)
        event.id = result.inserted_primary_key[0]
        event.status = OutboxStatus.NEW
        event.next_attempt_at = now
        event.created_at = now
        return event

    async def claim_batch(
        self,
        locked_by: str,
        now: datetime,
        limit: int,
        event_ids: Sequence[int] | None = None,
        lock_ttl_seconds: int = 60,
    ) -> list[OutboxEvent]:
        claimable = [
            or_(
                outbox_events.c.status.in_((OutboxStatus.NEW.value, OutboxStatus.RETRY.value)),
                # Worker caído: el lock expiró sin marcar el evento
                (outbox_events.c.status == OutboxStatus.IN_PROGRESS.value)
                & (outbox_events.c.lock_expires_at <= now),
            ),
            or_(
                outbox_events.c.next_attempt_at.is_(None),
                outbox_events.c.next_attempt_at <= now,
            ),
        ]
        candidates = (
            select(outbox_events.c.id)
            .where(*claimable)
            .order_by(outbox_events.c.id)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        if event_ids is not None:
            if not event_ids:
                return []
            candidates = candidates.where(outbox_events.c.id.in_(list(event_ids)))

        ids = list((await self._session.execute(candidates)).scalars())
        if not ids:
            return []

        stmt = (
            update(outbox_events)
            .where(outbox_events.c.id.in_(ids), *claimable)
            .values(
                locked_by=locked_by,
                lock_expires_at=now + timedelta(seconds=lock_ttl_seconds),
                updated_at=now,
                status=OutboxStatus.IN_PROGRESS.value,
            )
            .returning(outbox_events)
        )
        result = await self._session.execute(stmt)
        events = sorted((_row_to_event(row._mapping) for row in result), key=lambda e: e.id)
        logger.debug("Outbox events claimed", extra={"locked_by": locked_by, "count": len(events)})
        return events

    async def save(self, event: OutboxEvent) -> None:
        stmt = (
            update(outbox_events)
            .where(outbox_events.c.id == event.id)
            .values(
                status=event.status.value,
                attempts=event.attempts,
                next_attempt_at=event.next_attempt_at,
                locked_by=event.locked_by,
                lock_expires_at=event.lock_expires_at,
                error_code=event.error_code,
                error_message=event.error_message,
                updated_at=event.updated_at or _clock.now(),
            )
        )
        await self._session.execute(stmt)

    async def get(self, event_id: int) -> OutboxEvent | None:
        result = await self._session.execute(
            select(outbox_events).where(outbox_events.c.id == event_id)
        )
        row = result.first()
        return _row_to_event(row._mapping) if row else None
