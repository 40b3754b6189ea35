import json
import logging
from datetime import date

import httpx
from chillthrive.config import Settings
from chillthrive.db import models
from chillthrive.db.models import NotificationKind, OutboxStatus
from chillthrive.services import notification_service
from chillthrive.services.notification_service import (
    LoggingNotifier,
    NotificationObligation,
    WebhookNotifier,
    dispatch_pending,
    enqueue,
)


def obligation(kind=NotificationKind.received, feedback_reference=None, booking_id=7):
    return NotificationObligation(
        kind=kind,
        booking_id=booking_id,
        service_name="Ice Bath Therapy",
        booking_date=date(2025, 5, 21),
        time_slot="10:00 AM",
        customer_name="Asha",
        customer_email="asha@example.com",
        customer_phone="9876543210",
        feedback_reference=feedback_reference,
    )


def recording_client(status_code=200):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status_code, json={"success": status_code < 400})

    return httpx.Client(transport=httpx.MockTransport(handler)), requests


def test_webhook_posts_received_message():
    client, requests = recording_client()
    notifier = WebhookNotifier("https://hooks.example.com/email", api_key="key-123", client=client)

    notifier.send(obligation())

    assert len(requests) == 1
    assert requests[0].headers["Authorization"] == "Bearer key-123"
    assert json.loads(requests[0].content) == {
        "kind": "received",
        "bookingId": 7,
        "customerName": "Asha",
        "customerEmail": "asha@example.com",
        "customerPhone": "9876543210",
        "serviceName": "Ice Bath Therapy",
        "bookingDate": "2025-05-21",
        "timeSlot": "10:00 AM",
    }


def test_webhook_completed_message_carries_feedback_link():
    client, requests = recording_client()
    notifier = WebhookNotifier("https://hooks.example.com/email", client=client)

    notifier.send(obligation(NotificationKind.completed, "https://maps.example.com/review"))

    body = json.loads(requests[0].content)
    assert body["status"] == "completed"
    assert body["googleMapsUrl"] == "https://maps.example.com/review"
    assert "Authorization" not in requests[0].headers


def test_obligation_payload_survives_the_outbox():
    original = obligation(NotificationKind.completed, "https://maps.example.com/review")

    restored = NotificationObligation.from_payload("completed", original.to_payload())

    assert restored == original


def test_dispatch_marks_entries_sent(db_session):
    enqueue(db_session, obligation())
    enqueue(db_session, obligation(NotificationKind.confirmed, booking_id=8))
    db_session.commit()
    client, requests = recording_client()

    sent = dispatch_pending(db_session, WebhookNotifier("https://hooks.example.com/email", client=client))

    assert sent == 2
    assert [json.loads(r.content)["bookingId"] for r in requests] == [7, 8]
    entries = db_session.query(models.NotificationOutbox).all()
    assert {e.status for e in entries} == {OutboxStatus.sent}
    assert all(e.sent_at is not None and e.attempts == 1 for e in entries)
    assert dispatch_pending(db_session, LoggingNotifier()) == 0


def test_failed_delivery_is_retried_then_given_up(db_session):
    enqueue(db_session, obligation())
    db_session.commit()
    client, _ = recording_client(status_code=502)
    notifier = WebhookNotifier("https://hooks.example.com/email", client=client)

    assert dispatch_pending(db_session, notifier, max_attempts=2) == 0
    entry = db_session.query(models.NotificationOutbox).one()
    assert entry.status == OutboxStatus.pending
    assert entry.attempts == 1
    assert "502" in entry.last_error

    assert dispatch_pending(db_session, notifier, max_attempts=2) == 0
    db_session.refresh(entry)
    assert entry.status == OutboxStatus.failed
    assert entry.attempts == 2

    # failed rows are no longer picked up
    assert dispatch_pending(db_session, notifier, max_attempts=2) == 0
    db_session.refresh(entry)
    assert entry.attempts == 2


def test_logging_notifier_records_the_obligation(caplog):
    with caplog.at_level(logging.INFO, logger=notification_service.__name__):
        LoggingNotifier().send(obligation(NotificationKind.confirmed))

    record = caplog.records[-1]
    assert record.message == "Notification due"
    assert record.kind == "confirmed"
    assert record.booking_id == 7


def test_get_notifier_follows_settings():
    assert isinstance(notification_service.get_notifier(Settings()), LoggingNotifier)

    notifier = notification_service.get_notifier(
        Settings(NOTIFIER_WEBHOOK_URL="https://hooks.example.com/email", NOTIFIER_API_KEY="k")
    )

    assert isinstance(notifier, WebhookNotifier)
    assert notifier.api_key == "k"


class FlakyNotifier:
    """Drops the connection for one booking and delivers the rest."""

    def __init__(self, broken_booking_id):
        self.broken_booking_id = broken_booking_id
        self.delivered = []

    def send(self, obligation):
        if obligation.booking_id == self.broken_booking_id:
            raise ConnectionResetError("connection reset by peer")
        self.delivered.append(obligation.booking_id)


def test_unexpected_notifier_error_does_not_stall_the_outbox(db_session):
    enqueue(db_session, obligation(booking_id=7))
    enqueue(db_session, obligation(NotificationKind.confirmed, booking_id=8))
    db_session.commit()
    notifier = FlakyNotifier(broken_booking_id=7)

    for _ in range(5):
        dispatch_pending(db_session, notifier, max_attempts=3)

    assert notifier.delivered == [8]
    broken = db_session.query(models.NotificationOutbox).filter_by(booking_id=7).one()
    assert broken.status == OutboxStatus.failed
    assert broken.attempts == 3
    assert "connection reset" in broken.last_error
