from app.domain.entities.notification import Notification


class NotificationRepo:
    async def create(self, notification: Notification) -> Notification:
        raise NotImplementedError

    async def list_for_receiver(self, receiver_id: str) -> list[Notification]:
        """Notificaciones del destinatario, más recientes primero."""
        raise NotImplementedError

    async def delete(self, notification_id: str, receiver_id: str) -> bool:
        raise NotImplementedError

    async def delete_all_for_receiver(self, receiver_id: str) -> int:
        raise NotImplementedError
