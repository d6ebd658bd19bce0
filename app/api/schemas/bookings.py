from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from app.api.schemas.common import CamelModel
from app.domain.entities.booking import (
    Booking,
    BookingStatus,
    DriverStatus,
    PartnerStatus,
    PaymentStatus,
)
from app.domain.entities.party import Car, Party
from app.domain.value_objects.datetime_range import format_display_date


# === Requests ===


class CreateBookingRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    car_id: str = Field(min_length=1)
    partner_id: str | None = None
    is_driver_required: bool = False
    pick_up_location: str = Field(min_length=1)
    return_location: str = Field(min_length=1)
    pick_up_date_time: str
    return_date_time: str
    total_rent: float = Field(gt=0)
    # Se acepta por compatibilidad; la duración siempre se deriva de las fechas
    duration_in_hours: float | None = None

    @field_validator("pick_up_location", "return_location")
    @classmethod
    def strip_location(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("location must not be blank")
        return value


class UpdatePartnerStatusRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: str = Field(min_length=1)
    partner_status: PartnerStatus


class AssignDriverRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: str = Field(min_length=1)
    driver_id: str = Field(min_length=1)


class UpdateDriverStatusRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: str = Field(min_length=1)
    driver_status: DriverStatus
    rejection_reason: str | None = None


class UpdatePaymentStatusRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: str = Field(min_length=1)
    payment_status: PaymentStatus


# === Responses ===


class CarSummary(CamelModel):
    id: str
    brand: str
    model: str
    price_per_day: float
    registration_number: str | None = None

    @classmethod
    def from_entity(cls, car: Car) -> "CarSummary":
        return cls(
            id=car.id,
            brand=car.brand,
            model=car.model,
            price_per_day=car.price_per_day,
            registration_number=car.registration_number,
        )


class PartySummary(CamelModel):
    id: str
    full_name: str
    phone_number: str | None = None
    img_url: str | None = None

    @classmethod
    def from_entity(cls, party: Party) -> "PartySummary":
        return cls(
            id=party.id,
            full_name=party.full_name,
            phone_number=party.phone_number,
            img_url=party.img_url,
        )


class BookingOut(CamelModel):
    id: str
    customer_id: str
    car_id: str
    partner_id: str
    driver_id: str | None = None
    pickup_location: str
    dropoff_location: str
    start_date: datetime | str
    end_date: datetime | str
    duration_in_days: int
    total_amount: float
    penalties: float = 0
    status: BookingStatus
    payment_status: PaymentStatus
    partner_status: PartnerStatus
    driver_status: DriverStatus
    driver_rejection_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def fields_from(cls, booking: Booking, formatted: bool) -> dict:
        return {
            "id": booking.id,
            "customer_id": booking.customer_id,
            "car_id": booking.car_id,
            "partner_id": booking.partner_id,
            "driver_id": booking.driver_id,
            "pickup_location": booking.pickup_location,
            "dropoff_location": booking.dropoff_location,
            "start_date": format_display_date(booking.start_date) if formatted else booking.start_date,
            "end_date": format_display_date(booking.end_date) if formatted else booking.end_date,
            "duration_in_days": booking.duration_in_days,
            "total_amount": booking.total_amount,
            "penalties": booking.penalties,
            "status": booking.status,
            "payment_status": booking.payment_status,
            "partner_status": booking.partner_status,
            "driver_status": booking.driver_status,
            "driver_rejection_reason": booking.driver_rejection_reason,
            "created_at": booking.created_at,
            "updated_at": booking.updated_at,
        }

    @classmethod
    def from_entity(cls, booking: Booking, formatted: bool = False) -> "BookingOut":
        return cls(**cls.fields_from(booking, formatted))


class CarData(CamelModel):
    brand: str
    model: str
    price_per_day: float


class CreateBookingResponse(BookingOut):
    car_data: CarData


class BookingView(BookingOut):
    """Booking con fechas formateadas y entidades relacionadas embebidas."""

    car: CarSummary | None = None
    driver: PartySummary | None = None
    customer: PartySummary | None = None


class BookingDetail(BookingOut):
    """Proyección plana de un booking con datos de auto, cliente y partner."""

    car_model: str
    car_name: str
    registration_number: str = Field(alias="RegistrationNumber")
    price_per_day: float
    car_pickup_location: str
    car_dropoff_location: str
    c_name: str
    c_phone: str | None = None
    c_image: str | None = None
    partner_name: str
    partner_phone: str | None = None


class DeletedBookingResponse(CamelModel):
    id: str
    driver_id: str | None = None
