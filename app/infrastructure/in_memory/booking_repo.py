from dataclasses import replace
from datetime import datetime

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import Booking


def _overlaps(booking: Booking, start: datetime, end: datetime) -> bool:
    s, e = booking.start_date, booking.end_date
    return (s <= end and e >= start) or (s >= start and e <= end)


class InMemoryBookingRepo(BookingRepo):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}

    async def lock_parties(self, car_id: str, customer_id: str) -> None:
        # La exclusión la da InMemoryTransactionManager
        return None

    async def find_conflict(
        self,
        car_id: str,
        customer_id: str,
        start: datetime,
        end: datetime,
    ) -> str | None:
        if any(b.car_id == car_id and _overlaps(b, start, end) for b in self._bookings.values()):
            return "car"
        if any(
            b.customer_id == customer_id and _overlaps(b, start, end)
            for b in self._bookings.values()
        ):
            return "customer"
        return None

    async def add(self, booking: Booking) -> Booking:
        self._bookings[booking.id] = replace(booking)
        return booking

    async def get(self, booking_id: str, for_update: bool = False) -> Booking | None:
        booking = self._bookings.get(booking_id)
        return replace(booking) if booking else None

    async def save(self, booking: Booking) -> None:
        if booking.id in self._bookings:
            self._bookings[booking.id] = replace(booking)

    def _list(self, predicate) -> list[Booking]:
        found = [replace(b) for b in self._bookings.values() if predicate(b)]
        return sorted(found, key=lambda b: b.created_at or datetime.min, reverse=True)

    async def list_by_partner(self, partner_id: str) -> list[Booking]:
        return self._list(lambda b: b.partner_id == partner_id)

    async def list_by_customer(self, customer_id: str) -> list[Booking]:
        return self._list(lambda b: b.customer_id == customer_id)

    async def list_by_driver(self, driver_id: str) -> list[Booking]:
        return self._list(lambda b: b.driver_id == driver_id)

    async def list_by_car(self, car_id: str) -> list[Booking]:
        return self._list(lambda b: b.car_id == car_id)

    async def list_all(self) -> list[Booking]:
        return self._list(lambda b: True)

    async def delete_one_by_driver(self, driver_id: str) -> Booking | None:
        for booking_id, booking in self._bookings.items():
            if booking.driver_id == driver_id:
                return self._bookings.pop(booking_id)
        return None

    def _delete_where(self, predicate) -> int:
        doomed = [booking_id for booking_id, b in self._bookings.items() if predicate(b)]
        for booking_id in doomed:
            del self._bookings[booking_id]
        return len(doomed)

    async def delete_by_customer(self, customer_id: str) -> int:
        return self._delete_where(lambda b: b.customer_id == customer_id)

    async def delete_by_driver(self, driver_id: str) -> int:
        return self._delete_where(lambda b: b.driver_id == driver_id)

    async def delete_by_partner(self, partner_id: str) -> int:
        return self._delete_where(lambda b: b.partner_id == partner_id)

    def clear(self) -> None:
        self._bookings.clear()
