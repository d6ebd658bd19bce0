"""Excepciones de dominio para el sistema de bookings."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    status_code = 500

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de Booking ===


class BookingNotFoundError(DomainError):
    """El booking no existe."""

    status_code = 404

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"Booking not found: {booking_id}",
            code="BOOKING_NOT_FOUND",
        )
        self.booking_id = booking_id


class NoBookingsFoundError(DomainError):
    """Un listado no devolvió ningún booking."""

    status_code = 404

    def __init__(self, scope: str):
        super().__init__(
            message=f"No bookings found for {scope}",
            code="NO_BOOKINGS_FOUND",
        )
        self.scope = scope


class BookingConflictError(DomainError):
    """El intervalo solicitado se superpone con otro booking del auto o del cliente."""

    status_code = 400

    MESSAGES = {
        "car": "Car is already booked during the specified time. Please choose another time.",
        "customer": "You already have a booking during the specified time. Please choose another time.",
    }

    def __init__(self, resource: str):
        super().__init__(
            message=self.MESSAGES.get(resource, f"Booking conflict on {resource}"),
            code=f"{resource.upper()}_BOOKING_CONFLICT",
        )
        self.resource = resource


# === Errores de entidades referenciadas ===


class ReferenceNotFoundError(DomainError):
    """Una entidad referenciada por el booking no existe."""

    status_code = 404
    entity = "entity"

    def __init__(self, entity_id: str):
        super().__init__(
            message=f"{self.entity.capitalize()} not found: {entity_id}",
            code=f"{self.entity.upper()}_NOT_FOUND",
        )
        self.entity_id = entity_id


class CarNotFoundError(ReferenceNotFoundError):
    entity = "car"


class PartnerNotFoundError(ReferenceNotFoundError):
    entity = "partner"


class CustomerNotFoundError(ReferenceNotFoundError):
    entity = "customer"


class DriverNotFoundError(ReferenceNotFoundError):
    entity = "driver"


class NotificationNotFoundError(ReferenceNotFoundError):
    entity = "notification"


# === Errores de Validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validation failed on '{field}': {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


class InvalidDateRangeError(DomainError):
    """Rango de fechas inválido."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_DATE_RANGE")


class AuthenticationRequiredError(DomainError):
    """La petición no trae un principal resuelto por el servicio de identidad."""

    status_code = 401

    def __init__(self, message: str = "Authenticated principal is required"):
        super().__init__(message=message, code="AUTHENTICATION_REQUIRED")


# === Errores de Notificaciones ===


class NotificationDeliveryError(DomainError):
    """El gateway de push no está disponible; el evento se reintenta más tarde."""

    def __init__(self, message: str, error_code: str = "PUSH_UNAVAILABLE"):
        super().__init__(message=message, code=error_code)
