import logging
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.interfaces.push_gateway import PushResult
from app.application.use_cases.dispatch_notifications import DispatchNotificationsUseCase
from app.application.use_cases.notifications import CreateNotificationUseCase
from app.domain.entities.outbox_event import OutboxEvent, OutboxStatus


@pytest.fixture
def dispatcher(repos, clock, id_generator) -> DispatchNotificationsUseCase:
    return DispatchNotificationsUseCase(
        outbox_repo=repos["outbox_repo"],
        create_notification=CreateNotificationUseCase(
            repos["notification_repo"], clock, id_generator
        ),
        push_gateway=repos["push_gateway"],
        transaction_manager=repos["tx_manager"],
        clock=clock,
        max_attempts=3,
    )


def _in_app(**overrides) -> OutboxEvent:
    payload = {
        "receiver_id": "partner-1",
        "sender_id": "customer-1",
        "title": "New Booking Alert",
        "body": "Hi Paula Partner",
        "is_read": False,
        "type": "partner",
        "booking_id": "b-1",
    }
    payload.update(overrides)
    return OutboxEvent.in_app("b-1", payload)


def _push(tokens) -> OutboxEvent:
    return OutboxEvent.push(
        "b-1",
        tokens=tokens,
        title="New Car Booking Alert",
        body="Hello",
        data={"bookingId": "b-1", "click_action": "OPEN_PARTNER_BOOKING_REQUEST"},
    )


async def _enqueue(repos, clock, *events) -> list[int]:
    ids = []
    for event in events:
        event.created_at = clock.now()
        ids.append((await repos["outbox_repo"].enqueue(event)).id)
    return ids


class TestDispatch:
    @pytest.mark.asyncio
    async def test_delivers_in_app_and_push(self, dispatcher, repos, clock):
        ids = await _enqueue(repos, clock, _in_app(), _push(["partner-token-1", "", None]))

        run = await dispatcher.execute(event_ids=ids)

        assert (run.claimed, run.done, run.retried, run.failed) == (2, 2, 0, 0)
        notifications = repos["notification_repo"].all()
        assert len(notifications) == 1
        assert notifications[0].receiver_id == "partner-1"
        assert notifications[0].created_at == clock.now()
        assert [m["token"] for m in repos["push_gateway"].sent] == ["partner-token-1"]
        assert all(e.status == OutboxStatus.DONE for e in repos["outbox_repo"].all())

    @pytest.mark.asyncio
    async def test_push_without_tokens_is_done(self, dispatcher, repos, clock):
        await _enqueue(repos, clock, _push([]))

        run = await dispatcher.execute()

        assert run.done == 1
        assert repos["push_gateway"].sent == []

    @pytest.mark.asyncio
    async def test_rejected_token_is_logged_and_event_done(self, repos, clock, id_generator, caplog):
        gateway = AsyncMock()
        gateway.send.return_value = [
            PushResult(token="partner-token-1", success=True, message_id="m-1"),
            PushResult(token="stale-token", success=False, error="HTTP 404: unregistered"),
        ]
        dispatcher = DispatchNotificationsUseCase(
            outbox_repo=repos["outbox_repo"],
            create_notification=CreateNotificationUseCase(
                repos["notification_repo"], clock, id_generator
            ),
            push_gateway=gateway,
            transaction_manager=repos["tx_manager"],
            clock=clock,
        )
        [event_id] = await _enqueue(repos, clock, _push(["partner-token-1", "stale-token"]))

        with caplog.at_level(logging.WARNING):
            run = await dispatcher.execute(event_ids=[event_id])

        assert (run.done, run.retried, run.failed) == (1, 0, 0)
        event = await repos["outbox_repo"].get(event_id)
        assert event.status == OutboxStatus.DONE
        assert event.attempts == 0
        assert "Push delivery failed for token" in caplog.text

    @pytest.mark.asyncio
    async def test_only_requested_events_are_claimed(self, dispatcher, repos, clock):
        first, second = await _enqueue(repos, clock, _in_app(), _in_app(receiver_id="driver-1"))

        run = await dispatcher.execute(event_ids=[second])

        assert run.claimed == 1
        assert (await repos["outbox_repo"].get(first)).status == OutboxStatus.NEW

    @pytest.mark.asyncio
    async def test_invalid_payload_fails_without_retry(self, dispatcher, repos, clock):
        (event_id,) = await _enqueue(repos, clock, _in_app(receiver_id=None))

        run = await dispatcher.execute()

        assert run.failed == 1
        event = await repos["outbox_repo"].get(event_id)
        assert event.status == OutboxStatus.FAILED
        assert event.error_code == "VALIDATION_ERROR"
        assert repos["notification_repo"].all() == []


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_outage_is_retried_with_backoff(self, dispatcher, repos, clock):
        (event_id,) = await _enqueue(repos, clock, _push(["partner-token-1"]))
        repos["push_gateway"].fail_next = 1

        run = await dispatcher.execute()

        assert run.retried == 1
        event = await repos["outbox_repo"].get(event_id)
        assert event.status == OutboxStatus.RETRY
        assert event.attempts == 1
        assert event.error_code == "PUSH_UNAVAILABLE"
        assert event.next_attempt_at == clock.now() + timedelta(seconds=15)

        # Antes del backoff no se reclama
        assert (await dispatcher.execute()).claimed == 0

        clock.advance(seconds=15)
        run = await dispatcher.execute()

        assert run.done == 1
        assert len(repos["push_gateway"].sent) == 1

    @pytest.mark.asyncio
    async def test_event_fails_after_max_attempts(self, dispatcher, repos, clock):
        (event_id,) = await _enqueue(repos, clock, _push(["partner-token-1"]))
        repos["push_gateway"].fail_next = 10

        for _ in range(3):
            await dispatcher.execute()
            clock.advance(seconds=300)

        event = await repos["outbox_repo"].get(event_id)
        assert event.status == OutboxStatus.FAILED
        assert event.attempts == 3
        assert (await dispatcher.execute()).claimed == 0

    @pytest.mark.asyncio
    async def test_expired_lock_is_reclaimed(self, dispatcher, repos, clock):
        (event_id,) = await _enqueue(repos, clock, _in_app())
        crashed = await repos["outbox_repo"].claim_batch("crashed-worker", clock.now(), limit=10)
        assert [e.id for e in crashed] == [event_id]

        assert (await dispatcher.execute()).claimed == 0

        clock.advance(seconds=61)
        run = await dispatcher.execute()

        assert run.done == 1
