"""Value Object DatetimeRange - rango de fechas para pickup/return de un booking."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.domain.constants import BOOKING_INPUT_DATETIME_FORMAT
from app.domain.errors import InvalidDateRangeError, ValidationError

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_booking_datetime(value: str, field: str) -> datetime:
    """
    Parsea una fecha en formato DD/MM/YYYY HH:mm.

    El formato es fijo; cualquier otro (incluido ISO-8601) se rechaza
    en lugar de interpretarse con otro orden de día/mes.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "value is required")
    try:
        return datetime.strptime(value.strip(), BOOKING_INPUT_DATETIME_FORMAT)
    except ValueError as exc:
        raise ValidationError(field, "expected format DD/MM/YYYY HH:mm") from exc


def format_display_date(value: datetime) -> str:
    """Formatea una fecha como Mon-DD-YYYY (ej: May-01-2024)."""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]}-{value.day:02d}-{value.year}"


@dataclass(frozen=True)
class DatetimeRange:
    """
    Value Object inmutable que representa un rango de fechas/horas.

    Usado para startDate y endDate de un booking.

    Attributes:
        start: Fecha/hora de inicio (pickup).
        end: Fecha/hora de fin (return).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidDateRangeError(
                f"start must be before end: {self.start.isoformat()} >= {self.end.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        """Retorna la duración del rango."""
        return self.end - self.start

    @property
    def duration_in_days(self) -> int:
        """
        Calcula los días del booking.

        Regla de negocio: cualquier fracción de día cuenta como día completo.
        Ejemplo: 25 horas = 2 días.
        """
        return math.ceil(self.duration / timedelta(days=1))

    def overlaps_with(self, other: "DatetimeRange") -> bool:
        """
        Verifica si este rango se superpone con otro (límites inclusivos).

        El segundo término (other contenido en self) ya queda cubierto por el
        primero; se mantiene para que coincida con la consulta del repositorio.
        """
        return (
            (other.start <= self.end and other.end >= self.start)
            or (other.start >= self.start and other.end <= self.end)
        )

    @classmethod
    def from_input(cls, pickup: str, dropoff: str) -> "DatetimeRange":
        """Factory method para crear desde los strings DD/MM/YYYY HH:mm del request."""
        return cls(
            start=parse_booking_datetime(pickup, "pickUpDateTime"),
            end=parse_booking_datetime(dropoff, "returnDateTime"),
        )
