from datetime import datetime

from app.application.interfaces.notification_repo import NotificationRepo
from app.domain.entities.notification import Notification


class InMemoryNotificationRepo(NotificationRepo):
    def __init__(self) -> None:
        self._notifications: dict[str, Notification] = {}

    async def create(self, notification: Notification) -> Notification:
        self._notifications[notification.id] = notification
        return notification

    async def list_for_receiver(self, receiver_id: str) -> list[Notification]:
        found = [n for n in self._notifications.values() if n.receiver_id == receiver_id]
        return sorted(found, key=lambda n: n.created_at or datetime.min, reverse=True)

    async def delete(self, notification_id: str, receiver_id: str) -> bool:
        notification = self._notifications.get(notification_id)
        if not notification or notification.receiver_id != receiver_id:
            return False
        del self._notifications[notification_id]
        return True

    async def delete_all_for_receiver(self, receiver_id: str) -> int:
        doomed = [i for i, n in self._notifications.items() if n.receiver_id == receiver_id]
        for notification_id in doomed:
            del self._notifications[notification_id]
        return len(doomed)

    def all(self) -> list[Notification]:
        return list(self._notifications.values())

    def clear(self) -> None:
        self._notifications.clear()
