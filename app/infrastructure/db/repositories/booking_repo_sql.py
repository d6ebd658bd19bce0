from datetime import datetime

from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import (
    Booking,
    BookingStatus,
    DriverStatus,
    PartnerStatus,
    PaymentStatus,
)
from app.infrastructure.db.tables import bookings, cars, customer_booking_locks


def _overlaps(start: datetime, end: datetime):
    return or_(
        and_(bookings.c.start_date <= end, bookings.c.end_date >= start),
        and_(bookings.c.start_date >= start, bookings.c.end_date <= end),
    )


def _row_to_booking(row) -> Booking:
    return Booking(
        id=row["id"],
        customer_id=row["customer_id"],
        car_id=row["car_id"],
        partner_id=row["partner_id"],
        driver_id=row["driver_id"],
        pickup_location=row["pickup_location"],
        dropoff_location=row["dropoff_location"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        total_amount=row["total_amount"],
        penalties=row["penalties"] or 0,
        status=BookingStatus(row["status"]),
        payment_status=PaymentStatus(row["payment_status"]),
        partner_status=PartnerStatus(row["partner_status"]),
        driver_status=DriverStatus(row["driver_status"]),
        driver_rejection_reason=row["driver_rejection_reason"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _booking_values(booking: Booking) -> dict:
    return {
        "driver_id": booking.driver_id,
        "pickup_location": booking.pickup_location,
        "dropoff_location": booking.dropoff_location,
        "start_date": booking.start_date,
        "end_date": booking.end_date,
        # Se recalcula en cada escritura
        "duration_in_days": booking.duration_in_days,
        "total_amount": booking.total_amount,
        "penalties": booking.penalties,
        "status": booking.status.value,
        "payment_status": booking.payment_status.value,
        "partner_status": booking.partner_status.value,
        "driver_status": booking.driver_status.value,
        "driver_rejection_reason": booking.driver_rejection_reason,
        "updated_at": booking.updated_at,
    }


class BookingRepoSQL(BookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def lock_parties(self, car_id: str, customer_id: str) -> None:
        # Orden fijo auto -> cliente para minimizar deadlocks
        await self._session.execute(
            select(cars.c.id).where(cars.c.id == car_id).with_for_update()
        )
        await self._ensure_customer_lock_row(customer_id)
        await self._session.execute(
            select(customer_booking_locks.c.customer_id)
            .where(customer_booking_locks.c.customer_id == customer_id)
            .with_for_update()
        )

    async def _ensure_customer_lock_row(self, customer_id: str) -> None:
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = pg_insert(customer_booking_locks).values(customer_id=customer_id)
            stmt = stmt.on_conflict_do_nothing(index_elements=["customer_id"])
        else:
            stmt = insert(customer_booking_locks).values(customer_id=customer_id)
            stmt = stmt.prefix_with("OR IGNORE" if dialect == "sqlite" else "IGNORE")
        await self._session.execute(stmt)

    async def find_conflict(
        self,
        car_id: str,
        customer_id: str,
        start: datetime,
        end: datetime,
    ) -> str | None:
        for resource, column, value in (
            ("car", bookings.c.car_id, car_id),
            ("customer", bookings.c.customer_id, customer_id),
        ):
            stmt = select(bookings.c.id).where(column == value, _overlaps(start, end)).limit(1)
            result = await self._session.execute(stmt)
            if result.scalar() is not None:
                return resource
        return None

    async def add(self, booking: Booking) -> Booking:
        stmt = insert(bookings).values(
            id=booking.id,
            customer_id=booking.customer_id,
            car_id=booking.car_id,
            partner_id=booking.partner_id,
            created_at=booking.created_at,
            **_booking_values(booking),
        )
        await self._session.execute(stmt)
        return booking

    async def get(self, booking_id: str, for_update: bool = False) -> Booking | None:
        stmt = select(bookings).where(bookings.c.id == booking_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _row_to_booking(row) if row else None

    async def save(self, booking: Booking) -> None:
        stmt = (
            update(bookings)
            .where(bookings.c.id == booking.id)
            .values(**_booking_values(booking))
        )
        await self._session.execute(stmt)

    async def _list(self, *criteria) -> list[Booking]:
        stmt = select(bookings).where(*criteria).order_by(bookings.c.created_at.desc())
        result = await self._session.execute(stmt)
        return [_row_to_booking(row) for row in result.mappings()]

    async def list_by_partner(self, partner_id: str) -> list[Booking]:
        return await self._list(bookings.c.partner_id == partner_id)

    async def list_by_customer(self, customer_id: str) -> list[Booking]:
        return await self._list(bookings.c.customer_id == customer_id)

    async def list_by_driver(self, driver_id: str) -> list[Booking]:
        return await self._list(bookings.c.driver_id == driver_id)

    async def list_by_car(self, car_id: str) -> list[Booking]:
        return await self._list(bookings.c.car_id == car_id)

    async def list_all(self) -> list[Booking]:
        return await self._list()

    async def delete_one_by_driver(self, driver_id: str) -> Booking | None:
        stmt = select(bookings).where(bookings.c.driver_id == driver_id).limit(1)
        row = (await self._session.execute(stmt)).mappings().first()
        if not row:
            return None
        await self._session.execute(delete(bookings).where(bookings.c.id == row["id"]))
        return _row_to_booking(row)

    async def _delete_where(self, criterion) -> int:
        result = await self._session.execute(delete(bookings).where(criterion))
        return result.rowcount or 0

    async def delete_by_customer(self, customer_id: str) -> int:
        return await self._delete_where(bookings.c.customer_id == customer_id)

    async def delete_by_driver(self, driver_id: str) -> int:
        return await self._delete_where(bookings.c.driver_id == driver_id)

    async def delete_by_partner(self, partner_id: str) -> int:
        return await self._delete_where(bookings.c.partner_id == partner_id)
