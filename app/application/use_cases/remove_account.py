import logging

from app.application.dtos.booking_dto import AccountRemovalDTO
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.catalog_repo import CatalogRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.errors import CustomerNotFoundError, DriverNotFoundError, PartnerNotFoundError
from app.domain.value_objects.principal import Role

logger = logging.getLogger(__name__)


class RemoveAccountUseCase:
    """
    Baja de una cuenta con borrado en cascada de sus bookings.

    - customer: bookings con customerId igual.
    - driver: bookings con driverId igual.
    - partner: bookings con partnerId igual y los autos del partner.
    """

    def __init__(
        self,
        booking_repo: BookingRepo,
        catalog_repo: CatalogRepo,
        transaction_manager: TransactionManager,
    ) -> None:
        self._booking_repo = booking_repo
        self._catalog_repo = catalog_repo
        self._transaction_manager = transaction_manager

    async def execute(self, role: Role, account_id: str) -> AccountRemovalDTO:
        result = AccountRemovalDTO(account_id=account_id, role=role.value)

        async with self._transaction_manager.start():
            if role == Role.CUSTOMER:
                if not await self._catalog_repo.delete_customer(account_id):
                    raise CustomerNotFoundError(account_id)
                result.deleted_bookings = await self._booking_repo.delete_by_customer(account_id)
            elif role == Role.DRIVER:
                if not await self._catalog_repo.delete_driver(account_id):
                    raise DriverNotFoundError(account_id)
                result.deleted_bookings = await self._booking_repo.delete_by_driver(account_id)
            elif role == Role.PARTNER:
                if not await self._catalog_repo.delete_partner(account_id):
                    raise PartnerNotFoundError(account_id)
                result.deleted_bookings = await self._booking_repo.delete_by_partner(account_id)
                result.deleted_cars = await self._catalog_repo.delete_cars_by_partner(account_id)
            else:
                raise ValueError(f"Unsupported role for account removal: {role}")

        logger.info(
            "Account removed",
            extra={
                "account_id": account_id,
                "role": role.value,
                "deleted_bookings": result.deleted_bookings,
                "deleted_cars": result.deleted_cars,
            },
        )
        return result
