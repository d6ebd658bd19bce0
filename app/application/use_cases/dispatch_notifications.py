import logging
from collections.abc import Sequence

from app.application.dtos.booking_dto import OutboxRunDTO
from app.application.interfaces.clock import Clock
from app.application.interfaces.outbox_repo import OutboxRepo
from app.application.interfaces.push_gateway import PushGateway, PushResult
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.notifications import CreateNotificationUseCase
from app.domain.entities.outbox_event import OutboxEvent, OutboxEventType, OutboxStatus
from app.domain.errors import NotificationDeliveryError, ValidationError

logger = logging.getLogger(__name__)


class DispatchNotificationsUseCase:
    """
    Entrega los eventos NOTIFY_IN_APP / NOTIFY_PUSH del outbox.

    Corre fuera de la transacción del request: un fallo de entrega nunca
    revierte el booking ni llega al cliente HTTP. Los fallos transitorios se
    reprograman con backoff exponencial hasta agotar los intentos.
    """

    def __init__(
        self,
        outbox_repo: OutboxRepo,
        create_notification: CreateNotificationUseCase,
        push_gateway: PushGateway,
        transaction_manager: TransactionManager,
        clock: Clock,
        max_attempts: int = 5,
    ) -> None:
        self._outbox_repo = outbox_repo
        self._create_notification = create_notification
        self._push_gateway = push_gateway
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._max_attempts = max_attempts

    async def execute(
        self,
        event_ids: Sequence[int] | None = None,
        limit: int = 20,
        worker_id: str = "dispatcher-1",
    ) -> OutboxRunDTO:
        async with self._transaction_manager.start():
            events = await self._outbox_repo.claim_batch(
                locked_by=worker_id,
                now=self._clock.now(),
                limit=limit,
                event_ids=event_ids,
            )

        summary = OutboxRunDTO(claimed=len(events))
        for event in events:
            event.max_attempts = self._max_attempts
            await self._process(event)
            if event.status == OutboxStatus.DONE:
                summary.done += 1
            elif event.status == OutboxStatus.RETRY:
                summary.retried += 1
            else:
                summary.failed += 1
        return summary

    async def _process(self, event: OutboxEvent) -> None:
        try:
            async with self._transaction_manager.start():
                await self._deliver(event)
        except ValidationError as exc:
            # Payload inválido: reintentar no lo arregla
            self._finish(event, failed=True, error_code=exc.code, error_message=exc.message)
        except NotificationDeliveryError as exc:
            self._finish(event, failed=False, error_code=exc.code, error_message=exc.message)
        except Exception as exc:
            logger.exception(
                "Unexpected error dispatching notification",
                extra={"outbox_event_id": event.id, "booking_id": event.aggregate_code},
            )
            self._finish(event, failed=False, error_code="UNEXPECTED_ERROR", error_message=str(exc))
        else:
            event.mark_done(self._clock.now())
            logger.info(
                "Notification dispatched",
                extra={
                    "outbox_event_id": event.id,
                    "event_type": str(getattr(event.event_type, "value", event.event_type)),
                    "booking_id": event.aggregate_code,
                },
            )

        async with self._transaction_manager.start():
            await self._outbox_repo.save(event)

    async def _deliver(self, event: OutboxEvent) -> None:
        payload = event.payload
        if event.event_type == OutboxEventType.NOTIFY_IN_APP:
            await self._create_notification.execute(
                receiver_id=payload.get("receiver_id"),
                sender_id=payload.get("sender_id"),
                title=payload.get("title"),
                body=payload.get("body"),
                type=payload.get("type"),
                booking_id=payload.get("booking_id"),
                is_read=payload.get("is_read", False),
            )
        elif event.event_type == OutboxEventType.NOTIFY_PUSH:
            results = await self._push_gateway.send(
                tokens=payload.get("tokens"),
                title=payload.get("title", ""),
                body=payload.get("body", ""),
                data=payload.get("data") or {},
            )
            self._log_push_results(event, results)
        else:
            raise ValidationError("event_type", f"unsupported event type {event.event_type}")

    def _finish(self, event: OutboxEvent, failed: bool, error_code: str, error_message: str) -> None:
        now = self._clock.now()
        if failed:
            event.mark_failed(now, error_code, error_message)
        else:
            event.mark_retry(now, error_code, error_message)

        extra = {
            "outbox_event_id": event.id,
            "booking_id": event.aggregate_code,
            "attempt": event.attempts,
            "error_code": error_code,
        }
        if event.status == OutboxStatus.FAILED:
            logger.error("Notification dispatch failed permanently", extra=extra)
        else:
            extra["next_attempt_at"] = event.next_attempt_at.isoformat()
            logger.warning("Notification dispatch retry scheduled", extra=extra)

    def _log_push_results(self, event: OutboxEvent, results: PushResult | list[PushResult]) -> None:
        if isinstance(results, PushResult):
            results = [results]
        for result in results:
            if not result.success:
                logger.warning(
                    "Push delivery failed for token",
                    extra={
                        "outbox_event_id": event.id,
                        "booking_id": event.aggregate_code,
                        "error": result.error,
                    },
                )
