"""Interface CatalogRepo - Puerto de lectura para autos y cuentas con rol."""

from collections.abc import Iterable

from app.domain.entities.party import Car, Customer, Driver, Partner


class CatalogRepo:
    """
    Acceso a las entidades que un booking referencia.

    La lógica de bookings solo las lee; la única escritura es la baja de
    cuentas (cascada) y de los autos de un partner.
    """

    async def get_car(self, car_id: str) -> Car | None:
        raise NotImplementedError

    async def get_customer(self, customer_id: str) -> Customer | None:
        raise NotImplementedError

    async def get_partner(self, partner_id: str) -> Partner | None:
        raise NotImplementedError

    async def get_driver(self, driver_id: str) -> Driver | None:
        raise NotImplementedError

    async def get_cars(self, car_ids: Iterable[str]) -> dict[str, Car]:
        raise NotImplementedError

    async def get_customers(self, customer_ids: Iterable[str]) -> dict[str, Customer]:
        raise NotImplementedError

    async def get_drivers(self, driver_ids: Iterable[str]) -> dict[str, Driver]:
        raise NotImplementedError

    async def delete_customer(self, customer_id: str) -> bool:
        raise NotImplementedError

    async def delete_driver(self, driver_id: str) -> bool:
        raise NotImplementedError

    async def delete_partner(self, partner_id: str) -> bool:
        raise NotImplementedError

    async def delete_cars_by_partner(self, partner_id: str) -> int:
        raise NotImplementedError
