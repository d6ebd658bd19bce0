"""
Capa de Aplicación - Ciclo de vida de bookings.

Esta capa contiene los casos de uso, DTOs e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema
- dtos/: Data Transfer Objects
- interfaces/: Puertos (contratos para adaptadores)
- notification_messages.py: Textos de notificación y eventos de outbox
"""

from app.application.dtos import AccountRemovalDTO, BookingChangeDTO, OutboxRunDTO
from app.application.interfaces import (
    BookingRepo,
    CatalogRepo,
    Clock,
    FakeClock,
    FakeUUIDGenerator,
    NotificationRepo,
    OutboxRepo,
    PushGateway,
    PushResult,
    RealUUIDGenerator,
    StripeGateway,
    SystemClock,
    TransactionManager,
    UUIDGenerator,
)

__all__ = [
    # DTOs
    "AccountRemovalDTO",
    "BookingChangeDTO",
    "OutboxRunDTO",
    # Interfaces - Repositories
    "BookingRepo",
    "CatalogRepo",
    "NotificationRepo",
    "OutboxRepo",
    # Interfaces - Gateways
    "PushGateway",
    "PushResult",
    "StripeGateway",
    # Interfaces - Infrastructure
    "TransactionManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
]
