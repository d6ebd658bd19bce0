"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.catalog_repo import CatalogRepo
from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.notification_repo import NotificationRepo
from app.application.interfaces.outbox_repo import OutboxRepo
from app.application.interfaces.push_gateway import PushGateway, PushResult
from app.application.interfaces.stripe_gateway import StripeGateway
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.uuid_generator import (
    FakeUUIDGenerator,
    RealUUIDGenerator,
    UUIDGenerator,
)

__all__ = [
    # Repositories
    "BookingRepo",
    "CatalogRepo",
    "NotificationRepo",
    "OutboxRepo",
    # Gateways
    "PushGateway",
    "PushResult",
    "StripeGateway",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
]
