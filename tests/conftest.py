"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Repositorios en memoria con catálogo de prueba (autos, partners, clientes, conductores)
- Cliente HTTP de prueba (FastAPI TestClient) sobre el bundle en memoria
- Engine SQLite in-memory para los tests de repositorios SQL
- Reset de circuit breakers entre tests
"""

from datetime import datetime
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.dependencies import _in_memory_bundle
from app.application.interfaces.clock import FakeClock
from app.application.interfaces.uuid_generator import FakeUUIDGenerator
from app.domain.entities.party import Car, Customer, Driver, Partner
from app.domain.value_objects.principal import AuthenticatedPrincipal, Role
from app.infrastructure.db.tables import metadata
from app.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryCatalogRepo,
    InMemoryNotificationRepo,
    InMemoryOutboxRepo,
    InMemoryTransactionManager,
    StubPushGateway,
)
from app.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# DATOS DE PRUEBA
# ============================================================================

def seed_catalog(catalog: InMemoryCatalogRepo) -> None:
    """Catálogo mínimo: dos partners, dos autos, dos clientes y un conductor."""
    catalog.add_partner(
        Partner(
            id="partner-1",
            full_name="Paula Partner",
            phone_number="+15550000001",
            device_tokens=["partner-token-1"],
        )
    )
    catalog.add_partner(Partner(id="partner-2", full_name="Pedro Partner"))
    catalog.add_car(
        Car(
            id="car-1",
            partner_id="partner-1",
            brand="Toyota",
            model="Corolla",
            price_per_day=50.0,
            registration_number="ABC-123",
            pickup_location="Downtown Office",
            dropoff_location="Airport Office",
        )
    )
    catalog.add_car(
        Car(id="car-2", partner_id="partner-1", brand="Honda", model="Civic", price_per_day=45.0)
    )
    catalog.add_customer(
        Customer(
            id="customer-1",
            full_name="Carla Customer",
            phone_number="+15550000002",
            img_url="https://img.example.com/carla.png",
            device_tokens=["customer-token-1"],
        )
    )
    catalog.add_customer(Customer(id="customer-2", full_name="Carlos Customer"))
    catalog.add_driver(
        Driver(
            id="driver-1",
            full_name="Diego Driver",
            phone_number="+15550000003",
            device_tokens=["driver-token-1"],
        )
    )


def booking_payload(**overrides) -> dict:
    payload = {
        "carId": "car-1",
        "partnerId": "partner-1",
        "isDriverRequired": False,
        "pickUpLocation": "Downtown Office",
        "returnLocation": "Airport Office",
        "pickUpDateTime": "01/05/2024 10:00",
        "returnDateTime": "05/05/2024 10:00",
        "totalRent": 200,
        "durationInHours": 96,
    }
    payload.update(overrides)
    return payload


def auth_headers(linked_id: str = "customer-1", role: str = "customer") -> dict:
    return {"X-Linked-Id": linked_id, "X-User-Role": role, "X-User-Id": f"user-{linked_id}"}


# ============================================================================
# FIXTURES EN MEMORIA (casos de uso)
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 4, 20, 12, 0, 0))


@pytest.fixture
def id_generator() -> FakeUUIDGenerator:
    return FakeUUIDGenerator(prefix="test")


@pytest.fixture
def repos():
    """Repositorios y gateways en memoria, nuevos para cada test."""
    catalog = InMemoryCatalogRepo()
    seed_catalog(catalog)
    return {
        "booking_repo": InMemoryBookingRepo(),
        "catalog_repo": catalog,
        "notification_repo": InMemoryNotificationRepo(),
        "outbox_repo": InMemoryOutboxRepo(),
        "push_gateway": StubPushGateway(),
        "tx_manager": InMemoryTransactionManager(),
    }


@pytest.fixture
def customer() -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(linked_id="customer-1", role=Role.CUSTOMER)


@pytest.fixture
def partner() -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(linked_id="partner-1", role=Role.PARTNER)


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest.fixture
def bundle():
    """
    Bundle en memoria que usa la aplicación.

    Se limpia y se vuelve a sembrar antes de cada test.
    """
    shared = _in_memory_bundle()
    for key in ("booking_repo", "notification_repo", "outbox_repo", "push_gateway", "catalog_repo"):
        shared[key].clear()
    seed_catalog(shared["catalog_repo"])
    yield shared
    for key in ("booking_repo", "notification_repo", "outbox_repo", "push_gateway", "catalog_repo"):
        shared[key].clear()


@pytest.fixture
def client(bundle) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Engine SQLite in-memory con todas las tablas creadas."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# ============================================================================
# MARKERS DE PYTEST
# ============================================================================

def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: Tests que usan SQLAlchemy sobre SQLite in-memory"
    )
    config.addinivalue_line(
        "markers",
        "circuit_breaker: Tests del circuit breaker del gateway de push"
    )


# ============================================================================
# HOOKS DE PYTEST
# ============================================================================

@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """
    Reset circuit breakers antes de cada test.
    Evita que tests fallen por breakers abiertos de tests anteriores.
    """
    from app.infrastructure.circuit_breaker import push_breaker

    push_breaker.close()
    yield
    push_breaker.close()
