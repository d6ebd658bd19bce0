from app.api.schemas.bookings import BookingDetail, BookingOut, BookingView, CarSummary, PartySummary
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.catalog_repo import CatalogRepo
from app.domain.entities.booking import Booking
from app.domain.errors import BookingNotFoundError, NoBookingsFoundError


class GetBookingsUseCase:
    """
    Consultas de lectura con datos desnormalizados.

    Los listados por partner, cliente, conductor y auto responden 404 cuando
    están vacíos; el listado completo responde lista vacía.
    """

    def __init__(self, booking_repo: BookingRepo, catalog_repo: CatalogRepo) -> None:
        self._booking_repo = booking_repo
        self._catalog_repo = catalog_repo

    async def by_partner(self, partner_id: str) -> list[BookingView]:
        bookings = await self._booking_repo.list_by_partner(partner_id)
        if not bookings:
            raise NoBookingsFoundError(f"partner {partner_id}")
        return await self._with_car_and_driver(bookings)

    async def by_customer(self, customer_id: str) -> list[BookingView]:
        bookings = await self._booking_repo.list_by_customer(customer_id)
        if not bookings:
            raise NoBookingsFoundError(f"customer {customer_id}")
        return await self._with_car_and_driver(bookings)

    async def by_driver(self, driver_id: str) -> list[BookingView]:
        bookings = await self._booking_repo.list_by_driver(driver_id)
        if not bookings:
            raise NoBookingsFoundError(f"driver {driver_id}")
        customers = await self._catalog_repo.get_customers({b.customer_id for b in bookings})
        views = []
        for booking in bookings:
            customer = customers.get(booking.customer_id)
            views.append(
                BookingView(
                    **BookingOut.fields_from(booking, formatted=True),
                    customer=PartySummary.from_entity(customer) if customer else None,
                )
            )
        return views

    async def by_car(self, car_id: str) -> list[BookingOut]:
        bookings = await self._booking_repo.list_by_car(car_id)
        if not bookings:
            raise NoBookingsFoundError(f"car {car_id}")
        return [BookingOut.from_entity(booking) for booking in bookings]

    async def all(self) -> list[BookingOut]:
        # Sin paginación: recorre la colección completa
        bookings = await self._booking_repo.list_all()
        return [BookingOut.from_entity(booking, formatted=True) for booking in bookings]

    async def by_id(self, booking_id: str) -> BookingDetail:
        booking = await self._booking_repo.get(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)

        car = await self._catalog_repo.get_car(booking.car_id)
        customer = await self._catalog_repo.get_customer(booking.customer_id)
        partner = await self._catalog_repo.get_partner(booking.partner_id)
        # Semántica de inner join: si falta cualquier entidad, el booking no se proyecta
        if not car or not customer or not partner:
            raise BookingNotFoundError(booking_id)

        return BookingDetail(
            **BookingOut.fields_from(booking, formatted=True),
            car_model=car.model,
            car_name=car.brand,
            registration_number=car.registration_number,
            price_per_day=car.price_per_day,
            car_pickup_location=car.pickup_location,
            car_dropoff_location=car.dropoff_location,
            c_name=customer.full_name,
            c_phone=customer.phone_number,
            c_image=customer.img_url,
            partner_name=partner.full_name,
            partner_phone=partner.phone_number,
        )

    async def _with_car_and_driver(self, bookings: list[Booking]) -> list[BookingView]:
        cars = await self._catalog_repo.get_cars({b.car_id for b in bookings})
        drivers = await self._catalog_repo.get_drivers({b.driver_id for b in bookings if b.driver_id})
        views = []
        for booking in bookings:
            car = cars.get(booking.car_id)
            driver = drivers.get(booking.driver_id) if booking.driver_id else None
            views.append(
                BookingView(
                    **BookingOut.fields_from(booking, formatted=True),
                    car=CarSummary.from_entity(car) if car else None,
                    driver=PartySummary.from_entity(driver) if driver else None,
                )
            )
        return views
