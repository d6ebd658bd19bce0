"""Entidad OutboxEvent - intención de notificación registrada junto al booking."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from app.domain.constants import AGGREGATE_BOOKING, EVENT_NOTIFY_IN_APP, EVENT_NOTIFY_PUSH

BACKOFF_BASE_SECONDS = 15
BACKOFF_MAX_SECONDS = 300


class OutboxStatus(str, Enum):
    """Estados de un evento en el outbox."""

    NEW = "NEW"
    RETRY = "RETRY"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    FAILED = "FAILED"


class OutboxEventType(str, Enum):
    """Tipos de eventos del outbox."""

    NOTIFY_IN_APP = EVENT_NOTIFY_IN_APP
    NOTIFY_PUSH = EVENT_NOTIFY_PUSH


def backoff_seconds(attempts: int) -> int:
    """Backoff exponencial: 15s, 30s, 60s, 120s, 240s, tope 300s."""
    return min(BACKOFF_BASE_SECONDS * (2 ** max(attempts - 1, 0)), BACKOFF_MAX_SECONDS)


@dataclass
class OutboxEvent:
    """
    Evento del patrón Transactional Outbox.

    Se inserta en la misma transacción que la escritura del booking, de modo
    que una notificación solo existe si el booking se confirmó.
    """

    # Identificadores
    id: int | None = None

    # Tipo de evento
    event_type: OutboxEventType | str = OutboxEventType.NOTIFY_IN_APP

    # Agregado asociado
    aggregate_type: str = AGGREGATE_BOOKING
    aggregate_code: str | None = None

    # Payload del evento (JSON)
    payload: dict[str, Any] = field(default_factory=dict)

    # Estado
    status: OutboxStatus = OutboxStatus.NEW

    # Reintentos
    attempts: int = 0
    max_attempts: int = 5
    next_attempt_at: datetime | None = None

    # Locking para procesamiento distribuido
    locked_by: str | None = None
    lock_expires_at: datetime | None = None

    # Último error
    error_code: str | None = None
    error_message: str | None = None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def can_retry(self) -> bool:
        """Verifica si el evento puede ser reintentado."""
        return self.attempts < self.max_attempts

    @property
    def is_final(self) -> bool:
        """Verifica si el evento está en un estado final."""
        return self.status in (OutboxStatus.DONE, OutboxStatus.FAILED)

    def is_processable(self, now: datetime) -> bool:
        """Verifica si el evento puede ser reclamado en el instante dado."""
        if self.status not in (OutboxStatus.NEW, OutboxStatus.RETRY):
            return False
        if self.next_attempt_at and now < self.next_attempt_at:
            return False
        return True

    # === Métodos de negocio ===

    def claim(self, worker_id: str, now: datetime, lock_duration_seconds: int = 60) -> None:
        """Reclama el evento para un worker."""
        self.locked_by = worker_id
        self.lock_expires_at = now + timedelta(seconds=lock_duration_seconds)
        self.status = OutboxStatus.IN_PROGRESS
        self.updated_at = now

    def release_lock(self) -> None:
        """Libera el lock del evento."""
        self.locked_by = None
        self.lock_expires_at = None

    def mark_done(self, now: datetime) -> None:
        """Marca el evento como procesado exitosamente."""
        self.status = OutboxStatus.DONE
        self.error_code = None
        self.error_message = None
        self.updated_at = now
        self.release_lock()

    def mark_retry(self, now: datetime, error_code: str, error_message: str) -> None:
        """
        Registra un intento fallido.

        Reprograma con backoff exponencial o pasa a FAILED cuando se agotan
        los intentos.
        """
        self.attempts += 1
        self.error_code = error_code
        self.error_message = error_message[:1000]
        self.updated_at = now
        self.release_lock()

        if not self.can_retry:
            self.status = OutboxStatus.FAILED
            return

        self.status = OutboxStatus.RETRY
        self.next_attempt_at = now + timedelta(seconds=backoff_seconds(self.attempts))

    def mark_failed(self, now: datetime, error_code: str, error_message: str) -> None:
        """Marca el evento como fallido permanentemente (sin reintentos)."""
        self.attempts += 1
        self.status = OutboxStatus.FAILED
        self.error_code = error_code
        self.error_message = error_message[:1000]
        self.updated_at = now
        self.release_lock()

    # === Factories ===

    @classmethod
    def in_app(cls, booking_id: str, notification: dict[str, Any]) -> "OutboxEvent":
        """Factory para una notificación in-app."""
        return cls(
            event_type=OutboxEventType.NOTIFY_IN_APP,
            aggregate_code=booking_id,
            payload=notification,
        )

    @classmethod
    def push(
        cls,
        booking_id: str,
        tokens: list[str],
        title: str,
        body: str,
        data: dict[str, Any],
    ) -> "OutboxEvent":
        """Factory para un push a los dispositivos de un destinatario."""
        return cls(
            event_type=OutboxEventType.NOTIFY_PUSH,
            aggregate_code=booking_id,
            payload={"tokens": tokens, "title": title, "body": body, "data": data},
        )
