from datetime import datetime, timedelta

import pytest

from app.domain.entities.outbox_event import OutboxEvent, OutboxStatus, backoff_seconds

NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.mark.parametrize(
    ("attempts", "seconds"),
    [(1, 15), (2, 30), (3, 60), (4, 120), (5, 240), (6, 300), (10, 300)],
)
def test_backoff_is_exponential_and_capped(attempts, seconds):
    assert backoff_seconds(attempts) == seconds


def test_retry_schedules_next_attempt():
    event = OutboxEvent.in_app("b-1", {"receiver_id": "partner-1"})
    event.claim("worker-1", NOW)

    event.mark_retry(NOW, "PUSH_UNAVAILABLE", "provider down")

    assert event.status == OutboxStatus.RETRY
    assert event.attempts == 1
    assert event.next_attempt_at == NOW + timedelta(seconds=15)
    assert event.locked_by is None
    assert not event.is_processable(NOW)
    assert event.is_processable(NOW + timedelta(seconds=15))


def test_retry_fails_when_attempts_exhausted():
    event = OutboxEvent.push("b-1", ["t1"], "title", "body", {})
    event.max_attempts = 2

    event.mark_retry(NOW, "TIMEOUT", "slow")
    event.mark_retry(NOW, "TIMEOUT", "slow")

    assert event.status == OutboxStatus.FAILED
    assert event.is_final


def test_mark_failed_is_terminal():
    event = OutboxEvent.in_app("b-1", {})
    event.mark_failed(NOW, "VALIDATION_ERROR", "receiver_id is required")

    assert event.status == OutboxStatus.FAILED
    assert event.attempts == 1
    assert event.error_code == "VALIDATION_ERROR"
