"""
Capa de Infraestructura - Ciclo de vida de bookings.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).
Incluye adaptadores para bases de datos, gateways externos y workers.

Estructura:
- db/: Tablas, repositorios SQL, engine y transacciones
- gateways/: Adaptadores para servicios externos (Stripe, push)
- in_memory/: Implementaciones in-memory para desarrollo y testing
- messaging/: Worker del outbox de notificaciones
"""

# Database
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.catalog_repo_sql import CatalogRepoSQL
from app.infrastructure.db.repositories.notification_repo_sql import NotificationRepoSQL
from app.infrastructure.db.repositories.outbox_repo_sql import OutboxRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# Gateways
from app.infrastructure.gateways.push_gateway_http import PushGatewayHTTP
from app.infrastructure.gateways.stripe_gateway_real import StripeGatewayReal

# In-Memory
from app.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryCatalogRepo,
    InMemoryNotificationRepo,
    InMemoryOutboxRepo,
    InMemoryTransactionManager,
    StubPushGateway,
    StubStripeGateway,
)

# Messaging
from app.infrastructure.messaging.outbox_worker import OutboxWorker

__all__ = [
    # Database - Repositories SQL
    "BookingRepoSQL",
    "CatalogRepoSQL",
    "NotificationRepoSQL",
    "OutboxRepoSQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "PushGatewayHTTP",
    "StripeGatewayReal",
    # In-Memory Implementations
    "InMemoryBookingRepo",
    "InMemoryCatalogRepo",
    "InMemoryNotificationRepo",
    "InMemoryOutboxRepo",
    "InMemoryTransactionManager",
    "StubPushGateway",
    "StubStripeGateway",
    # Messaging
    "OutboxWorker",
]
