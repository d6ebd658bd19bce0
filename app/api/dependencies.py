import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import BackgroundTasks, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AsyncSessionLocal
from app.application.dtos.booking_dto import BookingChangeDTO
from app.application.interfaces.clock import SystemClock
from app.application.interfaces.uuid_generator import RealUUIDGenerator
from app.application.use_cases.assign_driver import AssignDriverUseCase
from app.application.use_cases.create_booking import CreateBookingUseCase
from app.application.use_cases.delete_booking import DeleteBookingByDriverUseCase
from app.application.use_cases.dispatch_notifications import DispatchNotificationsUseCase
from app.application.use_cases.get_bookings import GetBookingsUseCase
from app.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from app.application.use_cases.notifications import (
    CreateNotificationUseCase,
    DeleteAllNotificationsUseCase,
    DeleteNotificationUseCase,
    ListNotificationsUseCase,
)
from app.application.use_cases.remove_account import RemoveAccountUseCase
from app.application.use_cases.update_driver_status import UpdateDriverStatusUseCase
from app.application.use_cases.update_partner_status import UpdatePartnerStatusUseCase
from app.application.use_cases.update_payment_status import UpdatePaymentStatusUseCase
from app.config import Settings, get_settings
from app.domain.errors import AuthenticationRequiredError
from app.domain.value_objects.principal import AuthenticatedPrincipal, Role
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.catalog_repo_sql import CatalogRepoSQL
from app.infrastructure.db.repositories.notification_repo_sql import NotificationRepoSQL
from app.infrastructure.db.repositories.outbox_repo_sql import OutboxRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.push_gateway_http import PushGatewayHTTP
from app.infrastructure.gateways.stripe_gateway_real import StripeGatewayReal
from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.catalog_repo import InMemoryCatalogRepo
from app.infrastructure.in_memory.notification_repo import InMemoryNotificationRepo
from app.infrastructure.in_memory.outbox_repo import InMemoryOutboxRepo
from app.infrastructure.in_memory.push_gateway import StubPushGateway
from app.infrastructure.in_memory.stripe_gateway import StubStripeGateway
from app.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager

logger = logging.getLogger(__name__)


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def _in_memory_bundle():
    return {
        "booking_repo": InMemoryBookingRepo(),
        "catalog_repo": InMemoryCatalogRepo(),
        "notification_repo": InMemoryNotificationRepo(),
        "outbox_repo": InMemoryOutboxRepo(),
        "push_gateway": StubPushGateway(),
        "stripe_gateway": StubStripeGateway(),
        "tx_manager": InMemoryTransactionManager(),
        "clock": SystemClock(),
        "id_generator": RealUUIDGenerator(),
    }


@lru_cache(maxsize=1)
def _push_gateway(base_url: str | None, api_key: str | None, timeout_seconds: float):
    if not base_url:
        logger.warning("PUSH_BASE_URL not set; push notifications go to the stub gateway")
        return StubPushGateway()
    return PushGatewayHTTP(base_url=base_url, api_key=api_key, timeout_seconds=timeout_seconds)


def _sql_bundle(session: AsyncSession, settings: Settings) -> dict:
    return {
        "booking_repo": BookingRepoSQL(session),
        "catalog_repo": CatalogRepoSQL(session),
        "notification_repo": NotificationRepoSQL(session),
        "outbox_repo": OutboxRepoSQL(session),
        "push_gateway": _push_gateway(
            settings.push_base_url, settings.push_api_key, settings.push_timeout_seconds
        ),
        "stripe_gateway": StripeGatewayReal(api_key=settings.stripe_api_key),
        "tx_manager": SQLAlchemyTransactionManager(session),
        "clock": SystemClock(),
        "id_generator": RealUUIDGenerator(),
    }


def _dispatcher(bundle: dict, settings: Settings) -> DispatchNotificationsUseCase:
    return DispatchNotificationsUseCase(
        outbox_repo=bundle["outbox_repo"],
        create_notification=CreateNotificationUseCase(
            notification_repo=bundle["notification_repo"],
            clock=bundle["clock"],
            id_generator=bundle["id_generator"],
        ),
        push_gateway=bundle["push_gateway"],
        transaction_manager=bundle["tx_manager"],
        clock=bundle["clock"],
        max_attempts=settings.outbox_max_attempts,
    )


def _build_use_cases(bundle: dict, settings: Settings) -> dict:
    booking_repo = bundle["booking_repo"]
    catalog_repo = bundle["catalog_repo"]
    notification_repo = bundle["notification_repo"]
    outbox_repo = bundle["outbox_repo"]
    tx_manager = bundle["tx_manager"]
    clock = bundle["clock"]

    update_payment_status = UpdatePaymentStatusUseCase(
        booking_repo=booking_repo,
        transaction_manager=tx_manager,
        clock=clock,
    )
    return {
        "create_booking": CreateBookingUseCase(
            booking_repo=booking_repo,
            catalog_repo=catalog_repo,
            outbox_repo=outbox_repo,
            transaction_manager=tx_manager,
            clock=clock,
            id_generator=bundle["id_generator"],
        ),
        "update_partner_status": UpdatePartnerStatusUseCase(
            booking_repo=booking_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "assign_driver": AssignDriverUseCase(
            booking_repo=booking_repo,
            catalog_repo=catalog_repo,
            outbox_repo=outbox_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "update_driver_status": UpdateDriverStatusUseCase(
            booking_repo=booking_repo,
            catalog_repo=catalog_repo,
            outbox_repo=outbox_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "update_payment_status": update_payment_status,
        "handle_webhook": HandleStripeWebhookUseCase(
            update_payment_status=update_payment_status,
            stripe_gateway=bundle["stripe_gateway"],
            stripe_webhook_secret=settings.stripe_webhook_secret,
        ),
        "get_bookings": GetBookingsUseCase(booking_repo=booking_repo, catalog_repo=catalog_repo),
        "delete_booking": DeleteBookingByDriverUseCase(
            booking_repo=booking_repo,
            transaction_manager=tx_manager,
        ),
        "remove_account": RemoveAccountUseCase(
            booking_repo=booking_repo,
            catalog_repo=catalog_repo,
            transaction_manager=tx_manager,
        ),
        "list_notifications": ListNotificationsUseCase(notification_repo=notification_repo),
        "delete_notification": DeleteNotificationUseCase(
            notification_repo=notification_repo,
            transaction_manager=tx_manager,
        ),
        "delete_all_notifications": DeleteAllNotificationsUseCase(
            notification_repo=notification_repo,
            transaction_manager=tx_manager,
        ),
        "dispatch_notifications": _dispatcher(bundle, settings),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        return _build_use_cases(_in_memory_bundle(), settings)

    if not session:
        raise RuntimeError("DB session not available")
    return _build_use_cases(_sql_bundle(session, settings), settings)


def get_principal(
    x_linked_id: str | None = Header(default=None, alias="X-Linked-Id"),
    x_user_role: str | None = Header(default=None, alias="X-User-Role"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> AuthenticatedPrincipal:
    """Principal resuelto aguas arriba por el servicio de identidad."""
    if not x_linked_id or not x_user_role:
        raise AuthenticationRequiredError()
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError as exc:
        raise AuthenticationRequiredError(f"Unknown role: {x_user_role}") from exc
    return AuthenticatedPrincipal(linked_id=x_linked_id, role=role, user_id=x_user_id)


# === Despacho de notificaciones fuera del request ===


@asynccontextmanager
async def dispatcher_scope() -> AsyncIterator[DispatchNotificationsUseCase]:
    """Despachador con su propia sesión; la del request ya está cerrada."""
    settings = get_settings()
    if settings.use_in_memory:
        yield _dispatcher(_in_memory_bundle(), settings)
        return
    async with AsyncSessionLocal() as session:
        yield _dispatcher(_sql_bundle(session, settings), settings)


async def dispatch_outbox_events(event_ids: Sequence[int]) -> None:
    try:
        async with dispatcher_scope() as dispatcher:
            await dispatcher.execute(event_ids=list(event_ids), limit=len(event_ids))
    except Exception:
        # El worker del outbox reintenta lo que quede pendiente
        logger.exception(
            "Post-commit notification dispatch failed",
            extra={"event_ids": list(event_ids)},
        )


def schedule_dispatch(background_tasks: BackgroundTasks, change: BookingChangeDTO) -> None:
    if change.event_ids:
        background_tasks.add_task(dispatch_outbox_events, change.event_ids)
