import logging

from app.application.dtos.booking_dto import BookingChangeDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.booking import PartnerStatus
from app.domain.errors import BookingNotFoundError

logger = logging.getLogger(__name__)


class UpdatePartnerStatusUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._transaction_manager = transaction_manager
        self._clock = clock

    async def execute(self, booking_id: str, partner_status: PartnerStatus) -> BookingChangeDTO:
        async with self._transaction_manager.start():
            booking = await self._booking_repo.get(booking_id, for_update=True)
            if not booking:
                raise BookingNotFoundError(booking_id)

            booking.set_partner_status(partner_status)
            booking.touch(self._clock.now())
            await self._booking_repo.save(booking)

        logger.info(
            "Partner status updated",
            extra={
                "booking_id": booking_id,
                "partner_status": booking.partner_status.value,
                "status": booking.status.value,
            },
        )
        return BookingChangeDTO(booking=booking)
