from collections.abc import Iterable

from app.application.interfaces.catalog_repo import CatalogRepo
from app.domain.entities.party import Car, Customer, Driver, Partner


class InMemoryCatalogRepo(CatalogRepo):
    def __init__(self) -> None:
        self.cars: dict[str, Car] = {}
        self.customers: dict[str, Customer] = {}
        self.partners: dict[str, Partner] = {}
        self.drivers: dict[str, Driver] = {}

    # === Carga de datos (seed / tests) ===

    def add_car(self, car: Car) -> Car:
        self.cars[car.id] = car
        return car

    def add_customer(self, customer: Customer) -> Customer:
        self.customers[customer.id] = customer
        return customer

    def add_partner(self, partner: Partner) -> Partner:
        self.partners[partner.id] = partner
        return partner

    def add_driver(self, driver: Driver) -> Driver:
        self.drivers[driver.id] = driver
        return driver

    def clear(self) -> None:
        self.cars.clear()
        self.customers.clear()
        self.partners.clear()
        self.drivers.clear()

    # === CatalogRepo ===

    async def get_car(self, car_id: str) -> Car | None:
        return self.cars.get(car_id)

    async def get_customer(self, customer_id: str) -> Customer | None:
        return self.customers.get(customer_id)

    async def get_partner(self, partner_id: str) -> Partner | None:
        return self.partners.get(partner_id)

    async def get_driver(self, driver_id: str) -> Driver | None:
        return self.drivers.get(driver_id)

    async def get_cars(self, car_ids: Iterable[str]) -> dict[str, Car]:
        return {i: self.cars[i] for i in car_ids if i in self.cars}

    async def get_customers(self, customer_ids: Iterable[str]) -> dict[str, Customer]:
        return {i: self.customers[i] for i in customer_ids if i in self.customers}

    async def get_drivers(self, driver_ids: Iterable[str]) -> dict[str, Driver]:
        return {i: self.drivers[i] for i in driver_ids if i in self.drivers}

    async def delete_customer(self, customer_id: str) -> bool:
        return self.customers.pop(customer_id, None) is not None

    async def delete_driver(self, driver_id: str) -> bool:
        return self.drivers.pop(driver_id, None) is not None

    async def delete_partner(self, partner_id: str) -> bool:
        return self.partners.pop(partner_id, None) is not None

    async def delete_cars_by_partner(self, partner_id: str) -> int:
        doomed = [car_id for car_id, car in self.cars.items() if car.partner_id == partner_id]
        for car_id in doomed:
            del self.cars[car_id]
        return len(doomed)
