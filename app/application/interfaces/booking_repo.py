from datetime import datetime

from app.domain.entities.booking import Booking


class BookingRepo:
    async def lock_parties(self, car_id: str, customer_id: str) -> None:
        """Serializa creaciones concurrentes sobre el mismo auto o cliente."""
        raise NotImplementedError

    async def find_conflict(
        self,
        car_id: str,
        customer_id: str,
        start: datetime,
        end: datetime,
    ) -> str | None:
        """Retorna "car", "customer" o None (el auto se verifica primero)."""
        raise NotImplementedError

    async def add(self, booking: Booking) -> Booking:
        raise NotImplementedError

    async def get(self, booking_id: str, for_update: bool = False) -> Booking | None:
        raise NotImplementedError

    async def save(self, booking: Booking) -> None:
        raise NotImplementedError

    async def list_by_partner(self, partner_id: str) -> list[Booking]:
        raise NotImplementedError

    async def list_by_customer(self, customer_id: str) -> list[Booking]:
        raise NotImplementedError

    async def list_by_driver(self, driver_id: str) -> list[Booking]:
        raise NotImplementedError

    async def list_by_car(self, car_id: str) -> list[Booking]:
        raise NotImplementedError

    async def list_all(self) -> list[Booking]:
        raise NotImplementedError

    async def delete_one_by_driver(self, driver_id: str) -> Booking | None:
        raise NotImplementedError

    async def delete_by_customer(self, customer_id: str) -> int:
        raise NotImplementedError

    async def delete_by_driver(self, driver_id: str) -> int:
        raise NotImplementedError

    async def delete_by_partner(self, partner_id: str) -> int:
        raise NotImplementedError
