"""Value Objects del dominio de bookings."""

from app.domain.value_objects.datetime_range import (
    DatetimeRange,
    format_display_date,
    parse_booking_datetime,
)
from app.domain.value_objects.principal import AuthenticatedPrincipal, Role

__all__ = [
    "AuthenticatedPrincipal",
    "DatetimeRange",
    "Role",
    "format_display_date",
    "parse_booking_datetime",
]
