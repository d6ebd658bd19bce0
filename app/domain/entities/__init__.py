"""Entidades del dominio de bookings."""

from app.domain.entities.booking import (
    Booking,
    BookingStatus,
    DriverStatus,
    PartnerStatus,
    PaymentStatus,
    derive_status,
)
from app.domain.entities.notification import Notification, NotificationType
from app.domain.entities.outbox_event import OutboxEvent, OutboxEventType, OutboxStatus
from app.domain.entities.party import Car, Customer, Driver, Partner, Party

__all__ = [
    # Booking
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "PartnerStatus",
    "DriverStatus",
    "derive_status",
    # Referenciadas
    "Car",
    "Party",
    "Customer",
    "Partner",
    "Driver",
    # Notification
    "Notification",
    "NotificationType",
    # OutboxEvent
    "OutboxEvent",
    "OutboxEventType",
    "OutboxStatus",
]
