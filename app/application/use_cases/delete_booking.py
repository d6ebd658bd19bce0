import logging

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.booking import Booking
from app.domain.errors import NoBookingsFoundError

logger = logging.getLogger(__name__)


class DeleteBookingByDriverUseCase:
    """Borra un único booking cuyo driverId coincide con el parámetro de la ruta."""

    def __init__(self, booking_repo: BookingRepo, transaction_manager: TransactionManager) -> None:
        self._booking_repo = booking_repo
        self._transaction_manager = transaction_manager

    async def execute(self, driver_id: str) -> Booking:
        async with self._transaction_manager.start():
            booking = await self._booking_repo.delete_one_by_driver(driver_id)
        if not booking:
            raise NoBookingsFoundError(f"driver {driver_id}")
        logger.info("Booking deleted", extra={"booking_id": booking.id, "driver_id": driver_id})
        return booking
