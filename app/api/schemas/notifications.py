from datetime import datetime

from app.api.schemas.common import CamelModel
from app.domain.entities.notification import Notification


class NotificationOut(CamelModel):
    id: str
    receiver_id: str
    sender_id: str
    title: str
    body: str
    type: str
    booking_id: str | None = None
    is_read: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationOut":
        return cls(
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


class DeletedCount(CamelModel):
    deleted_count: int
