"""
Capa de Dominio - Ciclo de vida de bookings.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects y excepciones de dominio.

Estructura:
- entities/: Entidades del dominio (Booking, Car, Notification, etc.)
- value_objects/: Objetos de valor inmutables (DatetimeRange, AuthenticatedPrincipal)
- errors.py: Excepciones específicas del dominio
- constants.py: Constantes del dominio
"""

from app.domain.entities import (
    Booking,
    BookingStatus,
    Car,
    Customer,
    Driver,
    DriverStatus,
    Notification,
    NotificationType,
    OutboxEvent,
    OutboxEventType,
    OutboxStatus,
    Partner,
    PartnerStatus,
    PaymentStatus,
    derive_status,
)
from app.domain.errors import (
    AuthenticationRequiredError,
    BookingConflictError,
    BookingNotFoundError,
    CarNotFoundError,
    CustomerNotFoundError,
    DomainError,
    DriverNotFoundError,
    InvalidDateRangeError,
    NoBookingsFoundError,
    NotificationDeliveryError,
    NotificationNotFoundError,
    PartnerNotFoundError,
    ValidationError,
)
from app.domain.value_objects import AuthenticatedPrincipal, DatetimeRange, Role

__all__ = [
    # Entities
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "PartnerStatus",
    "DriverStatus",
    "derive_status",
    "Car",
    "Customer",
    "Partner",
    "Driver",
    "Notification",
    "NotificationType",
    "OutboxEvent",
    "OutboxEventType",
    "OutboxStatus",
    # Value Objects
    "DatetimeRange",
    "AuthenticatedPrincipal",
    "Role",
    # Errors
    "DomainError",
    "BookingNotFoundError",
    "NoBookingsFoundError",
    "BookingConflictError",
    "CarNotFoundError",
    "PartnerNotFoundError",
    "CustomerNotFoundError",
    "DriverNotFoundError",
    "NotificationNotFoundError",
    "ValidationError",
    "InvalidDateRangeError",
    "AuthenticationRequiredError",
    "NotificationDeliveryError",
]
