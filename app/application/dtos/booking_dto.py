"""DTOs de resultado de las operaciones sobre bookings."""

from dataclasses import dataclass, field

from app.domain.entities.booking import Booking
from app.domain.entities.party import Car


@dataclass
class BookingChangeDTO:
    """
    Resultado de una operación que modifica un booking.

    event_ids son los eventos de outbox encolados en la misma transacción;
    el router los despacha en segundo plano tras el commit.
    """

    booking: Booking
    event_ids: list[int] = field(default_factory=list)
    car: Car | None = None


@dataclass
class AccountRemovalDTO:
    """Resultado de la baja de una cuenta con borrado en cascada."""

    account_id: str
    role: str
    deleted_bookings: int = 0
    deleted_cars: int = 0


@dataclass
class OutboxRunDTO:
    """Resumen de una pasada del despachador de notificaciones."""

    claimed: int = 0
    done: int = 0
    retried: int = 0
    failed: int = 0
