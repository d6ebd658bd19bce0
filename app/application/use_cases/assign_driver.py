import logging

from app.application import notification_messages
from app.application.dtos.booking_dto import BookingChangeDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.catalog_repo import CatalogRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.outbox_repo import OutboxRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.party import Customer
from app.domain.errors import BookingNotFoundError, DriverNotFoundError
from app.domain.value_objects.principal import AuthenticatedPrincipal

logger = logging.getLogger(__name__)


class AssignDriverUseCase:
    """Asigna un conductor y avisa al conductor y al cliente."""

    def __init__(
        self,
        booking_repo: BookingRepo,
        catalog_repo: CatalogRepo,
        outbox_repo: OutboxRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._catalog_repo = catalog_repo
        self._outbox_repo = outbox_repo
        self._transaction_manager = transaction_manager
        self._clock = clock

    async def execute(
        self,
        booking_id: str,
        driver_id: str,
        principal: AuthenticatedPrincipal,
    ) -> BookingChangeDTO:
        async with self._transaction_manager.start():
            booking = await self._booking_repo.get(booking_id, for_update=True)
            if not booking:
                raise BookingNotFoundError(booking_id)
            driver = await self._catalog_repo.get_driver(driver_id)
            if not driver:
                raise DriverNotFoundError(driver_id)
            # El cliente puede haberse dado de baja; el push queda sin tokens
            customer = await self._catalog_repo.get_customer(booking.customer_id) or Customer(
                id=booking.customer_id
            )

            booking.assign_driver(driver.id)
            booking.touch(self._clock.now())
            await self._booking_repo.save(booking)

            event_ids = []
            for event in notification_messages.driver_assigned(
                booking, driver, customer, principal.linked_id
            ):
                event = await self._outbox_repo.enqueue(event)
                event_ids.append(event.id)

        logger.info(
            "Driver assigned",
            extra={"booking_id": booking_id, "driver_id": driver_id},
        )
        return BookingChangeDTO(booking=booking, event_ids=event_ids)
