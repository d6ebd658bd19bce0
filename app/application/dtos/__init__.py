"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from app.application.dtos.booking_dto import AccountRemovalDTO, BookingChangeDTO, OutboxRunDTO

__all__ = [
    "AccountRemovalDTO",
    "BookingChangeDTO",
    "OutboxRunDTO",
]
