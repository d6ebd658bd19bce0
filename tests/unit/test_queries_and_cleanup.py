from datetime import datetime

import pytest
import pytest_asyncio

from app.application.use_cases.delete_booking import DeleteBookingByDriverUseCase
from app.application.use_cases.get_bookings import GetBookingsUseCase
from app.application.use_cases.remove_account import RemoveAccountUseCase
from app.domain.entities.booking import Booking
from app.domain.errors import (
    BookingNotFoundError,
    CustomerNotFoundError,
    NoBookingsFoundError,
)
from app.domain.value_objects.principal import Role


def _booking(booking_id: str, **overrides) -> Booking:
    values = {
        "id": booking_id,
        "customer_id": "customer-1",
        "car_id": "car-1",
        "partner_id": "partner-1",
        "pickup_location": "Downtown Office",
        "dropoff_location": "Airport Office",
        "start_date": datetime(2024, 5, 1, 10, 0),
        "end_date": datetime(2024, 5, 5, 10, 0),
        "total_amount": 200.0,
        "created_at": datetime(2024, 4, 20, 12, 0),
    }
    values.update(overrides)
    return Booking(**values)


@pytest_asyncio.fixture
async def seeded(repos):
    booking_repo = repos["booking_repo"]
    await booking_repo.add(_booking("b-1", driver_id="driver-1"))
    await booking_repo.add(
        _booking(
            "b-2",
            customer_id="customer-2",
            car_id="car-2",
            start_date=datetime(2024, 6, 1, 10, 0),
            end_date=datetime(2024, 6, 2, 10, 0),
            created_at=datetime(2024, 4, 21, 12, 0),
        )
    )
    return repos


@pytest.fixture
def queries(repos) -> GetBookingsUseCase:
    return GetBookingsUseCase(repos["booking_repo"], repos["catalog_repo"])


class TestGetBookings:
    @pytest.mark.asyncio
    async def test_by_partner_embeds_car_and_driver(self, queries, seeded):
        views = await queries.by_partner("partner-1")

        assert [v.id for v in views] == ["b-2", "b-1"]
        first = views[1]
        assert first.start_date == "May-01-2024"
        assert first.car.brand == "Toyota"
        assert first.driver.full_name == "Diego Driver"
        assert views[0].driver is None

    @pytest.mark.asyncio
    async def test_by_driver_embeds_customer(self, queries, seeded):
        views = await queries.by_driver("driver-1")

        assert len(views) == 1
        assert views[0].customer.full_name == "Carla Customer"

    @pytest.mark.asyncio
    async def test_by_car_returns_raw_dates(self, queries, seeded):
        bookings = await queries.by_car("car-1")
        assert bookings[0].start_date == datetime(2024, 5, 1, 10, 0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["by_partner", "by_customer", "by_driver", "by_car"])
    async def test_empty_listings_raise(self, queries, method):
        with pytest.raises(NoBookingsFoundError) as exc_info:
            await getattr(queries, method)("nobody")
        assert exc_info.value.code == "NO_BOOKINGS_FOUND"

    @pytest.mark.asyncio
    async def test_all_returns_empty_list(self, queries):
        assert await queries.all() == []

    @pytest.mark.asyncio
    async def test_by_id_flattens_related_entities(self, queries, seeded):
        detail = await queries.by_id("b-1")

        dumped = detail.model_dump(by_alias=True)
        assert dumped["carModel"] == "Corolla"
        assert dumped["carName"] == "Toyota"
        assert dumped["RegistrationNumber"] == "ABC-123"
        assert dumped["pricePerDay"] == 50.0
        assert dumped["carPickupLocation"] == "Downtown Office"
        assert dumped["cName"] == "Carla Customer"
        assert dumped["cPhone"] == "+15550000002"
        assert dumped["partnerName"] == "Paula Partner"
        assert dumped["startDate"] == "May-01-2024"

    @pytest.mark.asyncio
    async def test_by_id_requires_all_joined_entities(self, queries, seeded, repos):
        await repos["catalog_repo"].delete_customer("customer-2")

        with pytest.raises(BookingNotFoundError):
            await queries.by_id("b-2")


class TestCleanup:
    @pytest.mark.asyncio
    async def test_delete_by_driver(self, repos, seeded):
        use_case = DeleteBookingByDriverUseCase(repos["booking_repo"], repos["tx_manager"])

        deleted = await use_case.execute("driver-1")

        assert deleted.id == "b-1"
        with pytest.raises(NoBookingsFoundError):
            await use_case.execute("driver-1")

    @pytest.mark.asyncio
    async def test_customer_removal_cascades_to_bookings(self, repos, seeded):
        use_case = RemoveAccountUseCase(repos["booking_repo"], repos["catalog_repo"], repos["tx_manager"])

        result = await use_case.execute(Role.CUSTOMER, "customer-1")

        assert result.deleted_bookings == 1
        assert await repos["catalog_repo"].get_customer("customer-1") is None
        assert [b.id for b in await repos["booking_repo"].list_all()] == ["b-2"]

    @pytest.mark.asyncio
    async def test_partner_removal_deletes_cars(self, repos, seeded):
        use_case = RemoveAccountUseCase(repos["booking_repo"], repos["catalog_repo"], repos["tx_manager"])

        result = await use_case.execute(Role.PARTNER, "partner-1")

        assert result.deleted_bookings == 2
        assert result.deleted_cars == 2
        assert repos["catalog_repo"].cars == {}

    @pytest.mark.asyncio
    async def test_driver_removal(self, repos, seeded):
        use_case = RemoveAccountUseCase(repos["booking_repo"], repos["catalog_repo"], repos["tx_manager"])

        result = await use_case.execute(Role.DRIVER, "driver-1")

        assert result.deleted_bookings == 1

    @pytest.mark.asyncio
    async def test_unknown_account(self, repos):
        use_case = RemoveAccountUseCase(repos["booking_repo"], repos["catalog_repo"], repos["tx_manager"])

        with pytest.raises(CustomerNotFoundError):
            await use_case.execute(Role.CUSTOMER, "customer-404")
