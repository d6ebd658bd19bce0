import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.api.dependencies import get_session
from app.application.dtos.booking_dto import OutboxRunDTO
from app.config import Settings, get_settings
from app.infrastructure.messaging.outbox_worker import OutboxWorker
from app.main import app
from tests.conftest import auth_headers, booking_payload


class TestOutboxWorkerEndpoint:
    def test_drains_scheduled_retries(self, client: TestClient, bundle):
        bundle["push_gateway"].fail_next = 1
        client.post(
            "/api/v1/booking/createBooking",
            json=booking_payload(),
            headers=auth_headers(),
        )
        retry = next(e for e in bundle["outbox_repo"].all() if e.status.value == "RETRY")
        # Vence el backoff
        retry.next_attempt_at = datetime(2000, 1, 1)
        bundle["outbox_repo"]._events[retry.id] = retry

        res = client.post("/api/v1/workers/outbox/notifications?limit=10&worker-id=test-worker")

        assert res.status_code == 200
        assert res.json()["data"] == {"claimed": 1, "done": 1, "retried": 0, "failed": 0}
        assert [m["token"] for m in bundle["push_gateway"].sent] == ["partner-token-1"]

    def test_nothing_pending(self, client: TestClient, bundle):
        res = client.post("/api/v1/workers/outbox/notifications")
        assert res.json()["data"]["claimed"] == 0


class TestOutboxWorker:
    @pytest.mark.asyncio
    async def test_run_once_uses_a_fresh_dispatcher(self):
        dispatcher = AsyncMock()
        dispatcher.execute.return_value = OutboxRunDTO(claimed=2, done=2)
        opened = []

        @asynccontextmanager
        async def factory():
            opened.append(True)
            yield dispatcher

        worker = OutboxWorker(factory, worker_id="worker-test", batch_size=7)
        summary = await worker.run_once()

        assert summary.done == 2
        assert opened == [True]
        dispatcher.execute.assert_awaited_once_with(limit=7, worker_id="worker-test")

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        dispatcher = AsyncMock()
        dispatcher.execute.return_value = OutboxRunDTO()

        @asynccontextmanager
        async def factory():
            yield dispatcher

        worker = OutboxWorker(factory, poll_interval_seconds=0.01)
        worker.start()
        await asyncio.sleep(0.05)
        assert worker.is_running

        await worker.stop()

        assert not worker.is_running
        assert dispatcher.execute.await_count >= 1

    @pytest.mark.asyncio
    async def test_cycle_errors_do_not_stop_the_loop(self):
        dispatcher = AsyncMock()
        dispatcher.execute.side_effect = [RuntimeError("db down"), OutboxRunDTO()]

        @asynccontextmanager
        async def factory():
            yield dispatcher

        worker = OutboxWorker(factory, poll_interval_seconds=0.01)
        worker.start()
        await asyncio.sleep(0.05)
        await worker.stop()

        assert dispatcher.execute.await_count >= 2


@pytest.fixture
def sql_health(client: TestClient):
    """Simula el bundle SQL: settings con use_in_memory=False y una sesión falsa."""
    session = AsyncMock()
    state = {"settings": Settings(use_in_memory=False)}

    async def override_session():
        yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_settings] = lambda: state["settings"]
    yield session, state
    app.dependency_overrides.clear()


class TestHealthChecks:
    def test_basic_health_endpoint(self, client: TestClient):
        res = client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok", "service": "bookings-api", "storage": "in_memory"}

    def test_liveness_endpoint(self, client: TestClient):
        assert client.get("/health/live").json()["status"] == "ok"

    def test_database_check_skipped_with_in_memory_repos(self, client: TestClient):
        res = client.get("/health/db")
        assert res.status_code == 200
        assert res.json()["status"] == "skipped"

    def test_readiness_with_in_memory_repos(self, client: TestClient):
        res = client.get("/health/ready")
        assert res.status_code == 200
        assert res.json() == {
            "status": "ready",
            "checks": {"storage": "in_memory", "outbox_worker": "disabled"},
        }

    def test_database_check_with_sql_storage(self, client: TestClient, sql_health):
        session, _ = sql_health

        res = client.get("/health/db")

        assert res.status_code == 200
        assert res.json()["status"] == "healthy"
        session.execute.assert_awaited_once()

    def test_database_unreachable_is_not_ready(self, client: TestClient, sql_health):
        session, _ = sql_health
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("unable to open database file"))

        assert client.get("/health/db").status_code == 503
        res = client.get("/health/ready")
        assert res.status_code == 503
        assert res.json()["checks"]["database"] == "unhealthy"

    def test_enabled_worker_must_be_running(self, client: TestClient, sql_health):
        _, state = sql_health
        state["settings"] = Settings(use_in_memory=False, outbox_worker_enabled=True)

        client.app.state.outbox_worker = None
        res = client.get("/health/ready")
        assert res.status_code == 503
        assert res.json()["checks"]["outbox_worker"] == "stopped"

        client.app.state.outbox_worker = Mock(is_running=True)
        res = client.get("/health/ready")
        assert res.status_code == 200
        assert res.json()["checks"] == {
            "storage": "sql",
            "database": "healthy",
            "outbox_worker": "running",
        }
