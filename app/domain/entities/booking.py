"""Entidad Booking - Agregado raíz del ciclo de vida de una reserva."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from app.domain.constants import (
    BOOKING_STATUS_BOOKED,
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_ONGOING,
    BOOKING_STATUS_PENDING,
    DRIVER_STATUS_ACCEPTED,
    DRIVER_STATUS_PENDING,
    DRIVER_STATUS_REJECTED,
    PARTNER_STATUS_CONFIRMED,
    PARTNER_STATUS_PENDING,
    PARTNER_STATUS_REJECTED,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_PENDING,
    PAYMENT_STATUS_REFUNDED,
)


class BookingStatus(str, Enum):
    """Estado global del booking (derivado, nunca enviado por el cliente)."""

    PENDING = BOOKING_STATUS_PENDING
    ONGOING = BOOKING_STATUS_ONGOING
    BOOKED = BOOKING_STATUS_BOOKED
    COMPLETED = BOOKING_STATUS_COMPLETED
    CANCELLED = BOOKING_STATUS_CANCELLED


class PaymentStatus(str, Enum):
    """Estados de pago del booking."""

    PENDING = PAYMENT_STATUS_PENDING
    COMPLETED = PAYMENT_STATUS_COMPLETED
    REFUNDED = PAYMENT_STATUS_REFUNDED


class PartnerStatus(str, Enum):
    """Decisión del partner dueño del auto."""

    PENDING = PARTNER_STATUS_PENDING
    CONFIRMED = PARTNER_STATUS_CONFIRMED
    REJECTED = PARTNER_STATUS_REJECTED


class DriverStatus(str, Enum):
    """Respuesta del conductor asignado."""

    PENDING = DRIVER_STATUS_PENDING
    ACCEPTED = DRIVER_STATUS_ACCEPTED
    REJECTED = DRIVER_STATUS_REJECTED


def derive_status(
    partner_status: PartnerStatus,
    driver_status: DriverStatus,
    payment_status: PaymentStatus,
    current: BookingStatus,
) -> BookingStatus:
    """
    Calcula el estado global a partir de los ejes independientes.

    Reglas, en orden:
    1. ongoing/completed reflejan el avance del viaje y no se tocan.
    2. Cualquier rechazo (partner o driver) cancela el booking.
    3. Pago completado deja el booking como booked.
    4. Un booking cancelado cuyo rechazo se retiró vuelve a pending.
    5. En cualquier otro caso se conserva el estado actual.
    """
    if current in (BookingStatus.ONGOING, BookingStatus.COMPLETED):
        return current
    if partner_status == PartnerStatus.REJECTED or driver_status == DriverStatus.REJECTED:
        return BookingStatus.CANCELLED
    if payment_status == PaymentStatus.COMPLETED:
        return BookingStatus.BOOKED
    if current == BookingStatus.CANCELLED:
        return BookingStatus.PENDING
    return current


@dataclass
class Booking:
    """
    Reserva de un auto por un cliente para un intervalo de tiempo.

    Los cuatro ejes (status, payment_status, partner_status, driver_status)
    se modifican por operaciones distintas; status siempre se recalcula.
    """

    # Identificadores
    id: str | None = None

    # Referencias (inmutables tras la creación)
    customer_id: str = ""
    car_id: str = ""
    partner_id: str = ""
    driver_id: str | None = None

    # Ubicaciones
    pickup_location: str = ""
    dropoff_location: str = ""

    # Fechas
    start_date: datetime | None = None
    end_date: datetime | None = None

    # Montos
    total_amount: float = 0.0
    penalties: float = 0.0

    # Estados
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    partner_status: PartnerStatus = PartnerStatus.PENDING
    driver_status: DriverStatus = DriverStatus.PENDING
    driver_rejection_reason: str | None = None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def duration_in_days(self) -> int:
        """Días facturables: cualquier fracción cuenta como día completo."""
        if not self.start_date or not self.end_date:
            return 0
        return math.ceil((self.end_date - self.start_date) / timedelta(days=1))

    # === Métodos de negocio ===

    def _recompute_status(self) -> None:
        self.status = derive_status(
            self.partner_status,
            self.driver_status,
            self.payment_status,
            self.status,
        )

    def set_partner_status(self, partner_status: PartnerStatus) -> None:
        """Registra la decisión del partner y recalcula el estado."""
        self.partner_status = PartnerStatus(partner_status)
        self._recompute_status()

    def set_driver_status(
        self, driver_status: DriverStatus, rejection_reason: str | None = None
    ) -> None:
        """Registra la respuesta del conductor y recalcula el estado."""
        self.driver_status = DriverStatus(driver_status)
        if self.driver_status == DriverStatus.REJECTED:
            self.driver_rejection_reason = rejection_reason
        else:
            self.driver_rejection_reason = None
        self._recompute_status()

    def set_payment_status(self, payment_status: PaymentStatus) -> None:
        """Registra el estado de pago; booked solo cuando el pago se completa."""
        self.payment_status = PaymentStatus(payment_status)
        self._recompute_status()

    def assign_driver(self, driver_id: str) -> None:
        """Asigna el conductor. No toca driver_status."""
        self.driver_id = driver_id

    def touch(self, now: datetime) -> None:
        """Actualiza timestamps de auditoría."""
        if self.created_at is None:
            self.created_at = now
        self.updated_at = now
