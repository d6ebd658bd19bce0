from datetime import datetime

import pytest
import pytest_asyncio

from app.application.use_cases.assign_driver import AssignDriverUseCase
from app.application.use_cases.update_driver_status import UpdateDriverStatusUseCase
from app.application.use_cases.update_partner_status import UpdatePartnerStatusUseCase
from app.application.use_cases.update_payment_status import UpdatePaymentStatusUseCase
from app.domain.entities.booking import (
    Booking,
    BookingStatus,
    DriverStatus,
    PartnerStatus,
    PaymentStatus,
)
from app.domain.errors import BookingNotFoundError, DriverNotFoundError
from app.domain.value_objects.principal import AuthenticatedPrincipal, Role


@pytest_asyncio.fixture
async def booking(repos) -> Booking:
    booking = Booking(
        id="booking-1",
        customer_id="customer-1",
        car_id="car-1",
        partner_id="partner-1",
        pickup_location="Downtown Office",
        dropoff_location="Airport Office",
        start_date=datetime(2024, 5, 1, 10, 0),
        end_date=datetime(2024, 5, 5, 10, 0),
        total_amount=200.0,
        driver_status=DriverStatus.PENDING,
        created_at=datetime(2024, 4, 20, 12, 0),
    )
    await repos["booking_repo"].add(booking)
    return booking


@pytest.fixture
def driver() -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(linked_id="driver-1", role=Role.DRIVER)


class TestPartnerStatus:
    @pytest.mark.asyncio
    async def test_rejection_cancels_and_confirmation_restores(self, repos, clock, booking):
        use_case = UpdatePartnerStatusUseCase(repos["booking_repo"], repos["tx_manager"], clock)

        rejected = await use_case.execute(booking.id, PartnerStatus.REJECTED)
        assert rejected.booking.status == BookingStatus.CANCELLED
        assert rejected.event_ids == []

        confirmed = await use_case.execute(booking.id, PartnerStatus.CONFIRMED)
        assert confirmed.booking.status == BookingStatus.PENDING

        stored = await repos["booking_repo"].get(booking.id)
        assert stored.partner_status == PartnerStatus.CONFIRMED
        assert stored.updated_at == clock.now()

    @pytest.mark.asyncio
    async def test_missing_booking(self, repos, clock):
        use_case = UpdatePartnerStatusUseCase(repos["booking_repo"], repos["tx_manager"], clock)
        with pytest.raises(BookingNotFoundError):
            await use_case.execute("missing", PartnerStatus.CONFIRMED)


class TestPaymentStatus:
    @pytest.mark.asyncio
    async def test_completed_payment_books_the_booking(self, repos, clock, booking):
        use_case = UpdatePaymentStatusUseCase(repos["booking_repo"], repos["tx_manager"], clock)

        change = await use_case.execute(booking.id, PaymentStatus.COMPLETED)

        assert change.booking.status == BookingStatus.BOOKED
        stored = await repos["booking_repo"].get(booking.id)
        assert stored.payment_status == PaymentStatus.COMPLETED
        assert stored.status == BookingStatus.BOOKED

    @pytest.mark.asyncio
    async def test_refund_keeps_status(self, repos, clock, booking):
        use_case = UpdatePaymentStatusUseCase(repos["booking_repo"], repos["tx_manager"], clock)

        await use_case.execute(booking.id, PaymentStatus.COMPLETED)
        change = await use_case.execute(booking.id, PaymentStatus.REFUNDED)

        assert change.booking.status == BookingStatus.BOOKED
        assert change.booking.payment_status == PaymentStatus.REFUNDED


class TestAssignDriver:
    @pytest.mark.asyncio
    async def test_enqueues_two_in_app_and_two_push(self, repos, clock, booking, partner):
        use_case = AssignDriverUseCase(
            repos["booking_repo"],
            repos["catalog_repo"],
            repos["outbox_repo"],
            repos["tx_manager"],
            clock,
        )

        change = await use_case.execute(booking.id, "driver-1", partner)

        assert change.booking.driver_id == "driver-1"
        assert change.booking.driver_status == DriverStatus.PENDING
        events = repos["outbox_repo"].all()
        assert len(events) == 4
        assert [e.id for e in events] == change.event_ids

        in_app = [e.payload for e in events if e.event_type == "NOTIFY_IN_APP"]
        push = [e.payload for e in events if e.event_type == "NOTIFY_PUSH"]
        assert {(p["receiver_id"], p["type"]) for p in in_app} == {
            ("driver-1", "driver"),
            ("customer-1", "customer"),
        }
        assert {p["data"]["click_action"] for p in push} == {
            "OPEN_DRIVER_BOOKING_REQUEST",
            "CUSTOMER_CONFIRMED_NOTIFICATION",
        }
        assert {tuple(p["tokens"]) for p in push} == {("driver-token-1",), ("customer-token-1",)}

    @pytest.mark.asyncio
    async def test_unknown_driver(self, repos, clock, booking, partner):
        use_case = AssignDriverUseCase(
            repos["booking_repo"],
            repos["catalog_repo"],
            repos["outbox_repo"],
            repos["tx_manager"],
            clock,
        )

        with pytest.raises(DriverNotFoundError):
            await use_case.execute(booking.id, "driver-404", partner)
        assert repos["outbox_repo"].all() == []


class TestDriverStatus:
    @pytest.fixture
    def use_case(self, repos, clock) -> UpdateDriverStatusUseCase:
        return UpdateDriverStatusUseCase(
            repos["booking_repo"],
            repos["catalog_repo"],
            repos["outbox_repo"],
            repos["tx_manager"],
            clock,
        )

    @pytest.mark.asyncio
    async def test_rejection_records_reason_and_notifies_customer(self, use_case, repos, booking, driver):
        change = await use_case.execute(
            booking.id, DriverStatus.REJECTED, driver, rejection_reason="Flat tire"
        )

        assert change.booking.status == BookingStatus.CANCELLED
        assert change.booking.driver_rejection_reason == "Flat tire"

        events = repos["outbox_repo"].all()
        assert len(events) == 2
        assert events[0].payload["receiver_id"] == "customer-1"
        assert events[1].payload["tokens"] == ["customer-token-1"]
        assert events[0].payload["title"] == "Your Driver Declined the Ride"

    @pytest.mark.asyncio
    async def test_acceptance_sends_confirmation(self, use_case, repos, booking, driver):
        change = await use_case.execute(booking.id, DriverStatus.ACCEPTED, driver)

        assert change.booking.driver_status == DriverStatus.ACCEPTED
        in_app = repos["outbox_repo"].all()[0].payload
        assert in_app["type"] == "customer"
        assert "Diego Driver" in in_app["title"]

    @pytest.mark.asyncio
    async def test_unknown_driver(self, use_case, booking):
        stranger = AuthenticatedPrincipal(linked_id="driver-404", role=Role.DRIVER)
        with pytest.raises(DriverNotFoundError):
            await use_case.execute(booking.id, DriverStatus.ACCEPTED, stranger)

    @pytest.mark.asyncio
    async def test_driver_is_resolved_from_caller_not_assignment(self, use_case, repos, booking):
        booking.driver_id = "driver-1"
        await repos["booking_repo"].save(booking)
        stranger = AuthenticatedPrincipal(linked_id="driver-404", role=Role.DRIVER)

        with pytest.raises(DriverNotFoundError) as exc_info:
            await use_case.execute(booking.id, DriverStatus.ACCEPTED, stranger)

        assert exc_info.value.entity_id == "driver-404"
        assert repos["outbox_repo"].all() == []
