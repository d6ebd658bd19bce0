from collections.abc import Iterable

from sqlalchemy import Table, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.catalog_repo import CatalogRepo
from app.domain.entities.party import Car, Customer, Driver, Partner, Party
from app.infrastructure.db.tables import cars, customers, drivers, partners


def _row_to_car(row) -> Car:
    return Car(
        id=row["id"],
        partner_id=row["partner_id"],
        brand=row["brand"],
        model=row["model"],
        price_per_day=row["price_per_day"] or 0,
        registration_number=row["registration_number"] or "",
        pickup_location=row["pickup_location"] or "",
        dropoff_location=row["dropoff_location"] or "",
    )


def _row_to_party(row, party_cls: type[Party]) -> Party:
    return party_cls(
        id=row["id"],
        full_name=row["full_name"],
        phone_number=row["phone_number"],
        email=row["email"],
        img_url=row["img_url"],
        device_tokens=list(row["device_tokens"] or []),
    )


class CatalogRepoSQL(CatalogRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get_party(self, table: Table, party_cls: type[Party], party_id: str):
        result = await self._session.execute(select(table).where(table.c.id == party_id))
        row = result.mappings().first()
        return _row_to_party(row, party_cls) if row else None

    async def _get_parties(self, table: Table, party_cls: type[Party], ids: Iterable[str]):
        ids = [i for i in ids if i]
        if not ids:
            return {}
        result = await self._session.execute(select(table).where(table.c.id.in_(ids)))
        return {row["id"]: _row_to_party(row, party_cls) for row in result.mappings()}

    async def _delete_party(self, table: Table, party_id: str) -> bool:
        result = await self._session.execute(delete(table).where(table.c.id == party_id))
        return bool(result.rowcount)

    async def get_car(self, car_id: str) -> Car | None:
        result = await self._session.execute(select(cars).where(cars.c.id == car_id))
        row = result.mappings().first()
        return _row_to_car(row) if row else None

    async def get_cars(self, car_ids: Iterable[str]) -> dict[str, Car]:
        ids = [i for i in car_ids if i]
        if not ids:
            return {}
        result = await self._session.execute(select(cars).where(cars.c.id.in_(ids)))
        return {row["id"]: _row_to_car(row) for row in result.mappings()}

    async def get_customer(self, customer_id: str) -> Customer | None:
        return await self._get_party(customers, Customer, customer_id)

    async def get_partner(self, partner_id: str) -> Partner | None:
        return await self._get_party(partners, Partner, partner_id)

    async def get_driver(self, driver_id: str) -> Driver | None:
        return await self._get_party(drivers, Driver, driver_id)

    async def get_customers(self, customer_ids: Iterable[str]) -> dict[str, Customer]:
        return await self._get_parties(customers, Customer, customer_ids)

    async def get_drivers(self, driver_ids: Iterable[str]) -> dict[str, Driver]:
        return await self._get_parties(drivers, Driver, driver_ids)

    async def delete_customer(self, customer_id: str) -> bool:
        return await self._delete_party(customers, customer_id)

    async def delete_driver(self, driver_id: str) -> bool:
        return await self._delete_party(drivers, driver_id)

    async def delete_partner(self, partner_id: str) -> bool:
        return await self._delete_party(partners, partner_id)

    async def delete_cars_by_partner(self, partner_id: str) -> int:
        result = await self._session.execute(delete(cars).where(cars.c.partner_id == partner_id))
        return result.rowcount or 0
