"""Implementaciones in-memory para desarrollo y testing."""

from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.catalog_repo import InMemoryCatalogRepo
from app.infrastructure.in_memory.notification_repo import InMemoryNotificationRepo
from app.infrastructure.in_memory.outbox_repo import InMemoryOutboxRepo
from app.infrastructure.in_memory.push_gateway import StubPushGateway
from app.infrastructure.in_memory.stripe_gateway import StubStripeGateway
from app.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager

__all__ = [
    # Repositories
    "InMemoryBookingRepo",
    "InMemoryCatalogRepo",
    "InMemoryNotificationRepo",
    "InMemoryOutboxRepo",
    # Gateways
    "StubPushGateway",
    "StubStripeGateway",
    # Infrastructure
    "InMemoryTransactionManager",
]
