import logging

from app.api.schemas.bookings import CreateBookingRequest
from app.application import notification_messages
from app.application.dtos.booking_dto import BookingChangeDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.catalog_repo import CatalogRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.outbox_repo import OutboxRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import UUIDGenerator
from app.domain.entities.booking import Booking, DriverStatus
from app.domain.errors import (
    BookingConflictError,
    CarNotFoundError,
    PartnerNotFoundError,
    ValidationError,
)
from app.domain.value_objects.datetime_range import DatetimeRange
from app.domain.value_objects.principal import AuthenticatedPrincipal
from app.infrastructure.db.retry import retry_on_deadlock

logger = logging.getLogger(__name__)


class CreateBookingUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        catalog_repo: CatalogRepo,
        outbox_repo: OutboxRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
        id_generator: UUIDGenerator,
    ) -> None:
        self._booking_repo = booking_repo
        self._catalog_repo = catalog_repo
        self._outbox_repo = outbox_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._id_generator = id_generator

    async def execute(
        self,
        request: CreateBookingRequest,
        principal: AuthenticatedPrincipal,
    ) -> BookingChangeDTO:
        period = DatetimeRange.from_input(request.pick_up_date_time, request.return_date_time)
        return await retry_on_deadlock(lambda: self._create(request, principal, period))

    async def _create(
        self,
        request: CreateBookingRequest,
        principal: AuthenticatedPrincipal,
        period: DatetimeRange,
    ) -> BookingChangeDTO:
        customer_id = principal.linked_id

        async with self._transaction_manager.start():
            car = await self._catalog_repo.get_car(request.car_id)
            if not car:
                raise CarNotFoundError(request.car_id)

            partner_id = request.partner_id or car.partner_id
            partner = await self._catalog_repo.get_partner(partner_id)
            if not partner:
                raise PartnerNotFoundError(partner_id)
            if partner_id != car.partner_id:
                raise ValidationError("partnerId", "partner does not own the requested car")

            await self._booking_repo.lock_parties(car.id, customer_id)
            conflict = await self._booking_repo.find_conflict(
                car_id=car.id,
                customer_id=customer_id,
                start=period.start,
                end=period.end,
            )
            if conflict:
                logger.info(
                    "Booking rejected: overlapping interval",
                    extra={"car_id": car.id, "customer_id": customer_id, "resource": conflict},
                )
                raise BookingConflictError(conflict)

            booking = Booking(
                id=self._id_generator.generate_id(),
                customer_id=customer_id,
                car_id=car.id,
                partner_id=partner_id,
                pickup_location=request.pick_up_location,
                dropoff_location=request.return_location,
                start_date=period.start,
                end_date=period.end,
                total_amount=request.total_rent,
                driver_status=(
                    DriverStatus.PENDING if request.is_driver_required else DriverStatus.ACCEPTED
                ),
            )
            booking.touch(self._clock.now())
            await self._booking_repo.add(booking)

            event_ids = []
            for event in notification_messages.booking_created(booking, car, partner, customer_id):
                event = await self._outbox_repo.enqueue(event)
                event_ids.append(event.id)

        logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "car_id": car.id,
                "customer_id": customer_id,
                "duration_in_days": booking.duration_in_days,
            },
        )
        return BookingChangeDTO(booking=booking, event_ids=event_ids, car=car)
