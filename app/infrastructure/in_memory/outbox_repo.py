from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from app.application.interfaces.clock import SystemClock
from app.application.interfaces.outbox_repo import OutboxRepo
from app.domain.entities.outbox_event import OutboxEvent, OutboxStatus

_clock = SystemClock()


class InMemoryOutboxRepo(OutboxRepo):
    def __init__(self) -> None:
        self._events: dict[int, OutboxEvent] = {}
        self._next_id = 1

    async def enqueue(self, event: OutboxEvent) -> OutboxEvent:
        now = event.created_at or _clock.now()
        event.id = self._next_id
        event.status = OutboxStatus.NEW
        event.next_attempt_at = now
        event.created_at = now
        self._events[event.id] = replace(event)
        self._next_id += 1
        return event

    def _claimable(self, event: OutboxEvent, now: datetime) -> bool:
        if event.status == OutboxStatus.IN_PROGRESS:
            return bool(event.lock_expires_at and event.lock_expires_at <= now)
        return event.is_processable(now)

    async def claim_batch(
        self,
        locked_by: str,
        now: datetime,
        limit: int,
        event_ids: Sequence[int] | None = None,
        lock_ttl_seconds: int = 60,
    ) -> list[OutboxEvent]:
        candidates = (
            [self._events[i] for i in event_ids if i in self._events]
            if event_ids is not None
            else list(self._events.values())
        )
        claimed = []
        for event in sorted(candidates, key=lambda e: e.id):
            if len(claimed) >= limit:
                break
            if not self._claimable(event, now):
                continue
            event.claim(locked_by, now, lock_ttl_seconds)
            claimed.append(replace(event))
        return claimed

    async def save(self, event: OutboxEvent) -> None:
        self._events[event.id] = replace(event)

    async def get(self, event_id: int) -> OutboxEvent | None:
        event = self._events.get(event_id)
        return replace(event) if event else None

    def all(self) -> list[OutboxEvent]:
        return [replace(e) for e in self._events.values()]

    def clear(self) -> None:
        self._events.clear()
        self._next_id = 1
