"""Entidad Notification - mensaje in-app persistido para un destinatario."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Audiencia de la notificación."""

    CUSTOMER = "customer"
    DRIVER = "driver"
    PARTNER = "partner"
    USER = "user"


@dataclass
class Notification:
    """Notificación in-app asociada opcionalmente a un booking."""

    id: str | None = None
    receiver_id: str = ""
    sender_id: str = ""
    title: str = ""
    body: str = ""
    type: NotificationType | str = NotificationType.USER
    booking_id: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
