from app.application.interfaces.clock import Clock
from app.application.interfaces.notification_repo import NotificationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import UUIDGenerator
from app.domain.entities.notification import Notification
from app.domain.errors import NotificationNotFoundError, ValidationError

REQUIRED_FIELDS = ("receiver_id", "sender_id", "title", "body", "type", "booking_id")


class CreateNotificationUseCase:
    """Persiste una notificación in-app; falla si falta algún campo requerido."""

    def __init__(
        self,
        notification_repo: NotificationRepo,
        clock: Clock,
        id_generator: UUIDGenerator,
    ) -> None:
        self._notification_repo = notification_repo
        self._clock = clock
        self._id_generator = id_generator

    async def execute(
        self,
        receiver_id: str,
        sender_id: str,
        title: str,
        body: str,
        type: str,
        booking_id: str,
        is_read: bool = False,
    ) -> Notification:
        values = {
            "receiver_id": receiver_id,
            "sender_id": sender_id,
            "title": title,
            "body": body,
            "type": type,
            "booking_id": booking_id,
        }
        for field in REQUIRED_FIELDS:
            if not values[field]:
                raise ValidationError(field, "is required")

        notification = Notification(
            id=self._id_generator.generate_id(),
            is_read=is_read,
            created_at=self._clock.now(),
            **values,
        )
        return await self._notification_repo.create(notification)


class ListNotificationsUseCase:
    def __init__(self, notification_repo: NotificationRepo) -> None:
        self._notification_repo = notification_repo

    async def execute(self, receiver_id: str) -> list[Notification]:
        return await self._notification_repo.list_for_receiver(receiver_id)


class DeleteNotificationUseCase:
    def __init__(
        self,
        notification_repo: NotificationRepo,
        transaction_manager: TransactionManager,
    ) -> None:
        self._notification_repo = notification_repo
        self._transaction_manager = transaction_manager

    async def execute(self, notification_id: str, receiver_id: str) -> None:
        async with self._transaction_manager.start():
            deleted = await self._notification_repo.delete(notification_id, receiver_id)
        if not deleted:
            raise NotificationNotFoundError(notification_id)


class DeleteAllNotificationsUseCase:
    def __init__(
        self,
        notification_repo: NotificationRepo,
        transaction_manager: TransactionManager,
    ) -> None:
        self._notification_repo = notification_repo
        self._transaction_manager = transaction_manager

    async def execute(self, receiver_id: str) -> int:
        async with self._transaction_manager.start():
            return await self._notification_repo.delete_all_for_receiver(receiver_id)
