from datetime import datetime

import pytest

from app.domain.entities.booking import (
    Booking,
    BookingStatus,
    DriverStatus,
    PartnerStatus,
    PaymentStatus,
    derive_status,
)


class TestDeriveStatus:
    @pytest.mark.parametrize("current", [BookingStatus.ONGOING, BookingStatus.COMPLETED])
    def test_trip_progress_is_never_overridden(self, current):
        status = derive_status(
            PartnerStatus.REJECTED, DriverStatus.REJECTED, PaymentStatus.COMPLETED, current
        )
        assert status == current

    def test_partner_rejection_cancels(self):
        status = derive_status(
            PartnerStatus.REJECTED, DriverStatus.ACCEPTED, PaymentStatus.COMPLETED, BookingStatus.BOOKED
        )
        assert status == BookingStatus.CANCELLED

    def test_driver_rejection_cancels(self):
        status = derive_status(
            PartnerStatus.CONFIRMED, DriverStatus.REJECTED, PaymentStatus.PENDING, BookingStatus.PENDING
        )
        assert status == BookingStatus.CANCELLED

    def test_completed_payment_books(self):
        status = derive_status(
            PartnerStatus.PENDING, DriverStatus.ACCEPTED, PaymentStatus.COMPLETED, BookingStatus.PENDING
        )
        assert status == BookingStatus.BOOKED

    def test_withdrawn_rejection_returns_to_pending(self):
        status = derive_status(
            PartnerStatus.CONFIRMED, DriverStatus.ACCEPTED, PaymentStatus.PENDING, BookingStatus.CANCELLED
        )
        assert status == BookingStatus.PENDING

    @pytest.mark.parametrize("payment", [PaymentStatus.PENDING, PaymentStatus.REFUNDED])
    def test_other_payment_states_keep_current(self, payment):
        status = derive_status(
            PartnerStatus.CONFIRMED, DriverStatus.ACCEPTED, payment, BookingStatus.BOOKED
        )
        assert status == BookingStatus.BOOKED


class TestBookingEntity:
    def _booking(self, **overrides) -> Booking:
        values = {
            "id": "b-1",
            "customer_id": "customer-1",
            "car_id": "car-1",
            "partner_id": "partner-1",
            "start_date": datetime(2024, 5, 1, 10, 0),
            "end_date": datetime(2024, 5, 2, 11, 0),
            "total_amount": 100.0,
        }
        values.update(overrides)
        return Booking(**values)

    def test_duration_in_days(self):
        assert self._booking().duration_in_days == 2

    def test_driver_rejection_keeps_reason_until_accepted(self):
        booking = self._booking()

        booking.set_driver_status(DriverStatus.REJECTED, "Vehicle issue")
        assert booking.status == BookingStatus.CANCELLED
        assert booking.driver_rejection_reason == "Vehicle issue"

        booking.set_driver_status(DriverStatus.ACCEPTED, "ignored")
        assert booking.status == BookingStatus.PENDING
        assert booking.driver_rejection_reason is None

    def test_payment_status_accepts_raw_values(self):
        booking = self._booking()
        booking.set_payment_status("completed")

        assert booking.payment_status == PaymentStatus.COMPLETED
        assert booking.status == BookingStatus.BOOKED

    def test_assign_driver_does_not_touch_driver_status(self):
        booking = self._booking(driver_status=DriverStatus.ACCEPTED)
        booking.assign_driver("driver-1")

        assert booking.driver_id == "driver-1"
        assert booking.driver_status == DriverStatus.ACCEPTED

    def test_touch_sets_created_once(self):
        booking = self._booking()
        first = datetime(2024, 4, 1, 8, 0)
        later = datetime(2024, 4, 2, 8, 0)

        booking.touch(first)
        booking.touch(later)

        assert booking.created_at == first
        assert booking.updated_at == later
