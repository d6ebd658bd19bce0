from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.notification_repo import NotificationRepo
from app.domain.entities.notification import Notification
from app.infrastructure.db.tables import notifications


class NotificationRepoSQL(NotificationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, notification: Notification) -> Notification:
        stmt = insert(notifications).values(
            id=notification.id,
            receiver_id=notification.receiver_id,
            sender_id=notification.sender_id,
            title=notification.title,
            body=notification.body,
            type=getattr(notification.type, "value", notification.type),
            booking_id=notification.booking_id,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
        await self._session.execute(stmt)
        return notification

    async def list_for_receiver(self, receiver_id: str) -> list[Notification]:
        stmt = (
            select(notifications)
            .where(notifications.c.receiver_id == receiver_id)
            .order_by(notifications.c.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [Notification(**dict(row)) for row in result.mappings()]

    async def delete(self, notification_id: str, receiver_id: str) -> bool:
        result = await self._session.execute(
            delete(notifications).where(
                notifications.c.id == notification_id,
                notifications.c.receiver_id == receiver_id,
            )
        )
        return bool(result.rowcount)

    async def delete_all_for_receiver(self, receiver_id: str) -> int:
        result = await self._session.execute(
            delete(notifications).where(notifications.c.receiver_id == receiver_id)
        )
        return result.rowcount or 0
