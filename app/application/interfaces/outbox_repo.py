from collections.abc import Sequence
from datetime import datetime

from app.domain.entities.outbox_event import OutboxEvent


class OutboxRepo:
    async def enqueue(self, event: OutboxEvent) -> OutboxEvent:
        raise NotImplementedError

    async def claim_batch(
        self,
        locked_by: str,
        now: datetime,
        limit: int,
        event_ids: Sequence[int] | None = None,
        lock_ttl_seconds: int = 60,
    ) -> list[OutboxEvent]:
        """
        Reclama eventos NEW/RETRY vencidos (o con lock expirado).

        Si se pasan event_ids solo se consideran esos eventos.
        """
        raise NotImplementedError

    async def save(self, event: OutboxEvent) -> None:
        raise NotImplementedError

    async def get(self, event_id: int) -> OutboxEvent | None:
        raise NotImplementedError
