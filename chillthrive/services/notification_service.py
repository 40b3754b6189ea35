from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Protocol

import httpx
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.constants import OUTBOX_BATCH_SIZE
from ..db import models
from ..db.models.notification import NotificationKind, OutboxStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NotificationObligation:
    """A message that is due for a booking; delivery happens elsewhere."""

    kind: NotificationKind
    booking_id: int
    service_name: str | None
    booking_date: date
    time_slot: str
    customer_name: str
    customer_email: str
    customer_phone: str
    feedback_reference: str | None = None

    @classmethod
    def for_booking(
        cls,
        kind: NotificationKind,
        booking: models.Booking,
        *,
        service_name: str | None = None,
        feedback_reference: str | None = None,
    ) -> "NotificationObligation":
        if service_name is None and booking.service is not None:
            service_name = booking.service.name
        return cls(
            kind=kind,
            booking_id=booking.id,
            service_name=service_name,
            booking_date=booking.booking_date,
            time_slot=booking.time_slot,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            feedback_reference=feedback_reference,
        )

    def to_payload(self) -> dict:
        return {
            "booking_id": self.booking_id,
            "service_name": self.service_name,
            "booking_date": self.booking_date.isoformat(),
            "time_slot": self.time_slot,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "feedback_reference": self.feedback_reference,
        }

    @classmethod
    def from_payload(cls, kind: NotificationKind, payload: dict) -> "NotificationObligation":
        return cls(
            kind=NotificationKind(kind),
            booking_id=payload["booking_id"],
            service_name=payload.get("service_name"),
            booking_date=date.fromisoformat(payload["booking_date"]),
            time_slot=payload["time_slot"],
            customer_name=payload["customer_name"],
            customer_email=payload["customer_email"],
            customer_phone=payload["customer_phone"],
            feedback_reference=payload.get("feedback_reference"),
        )


class Notifier(Protocol):
    def send(self, obligation: NotificationObligation) -> None: ...


class LoggingNotifier:
    def send(self, obligation: NotificationObligation) -> None:
        logger.info(
            "Notification due",
            extra={
                "kind": obligation.kind.value,
                "booking_id": obligation.booking_id,
                "customer_email": obligation.customer_email,
            },
        )


class WebhookNotifier:
    """Posts obligations to the hosted email function."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _body(self, obligation: NotificationObligation) -> dict:
        body = {
            "kind": obligation.kind.value,
            "bookingId": obligation.booking_id,
            "customerName": obligation.customer_name,
            "customerEmail": obligation.customer_email,
            "customerPhone": obligation.customer_phone,
            "serviceName": obligation.service_name,
            "bookingDate": obligation.booking_date.isoformat(),
            "timeSlot": obligation.time_slot,
        }
        if obligation.kind != NotificationKind.received:
            body["status"] = obligation.kind.value
        if obligation.feedback_reference:
            body["googleMapsUrl"] = obligation.feedback_reference
        return body

    def send(self, obligation: NotificationObligation) -> None:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        body = self._body(obligation)
        if self._client is not None:
            response = self._client.post(self.url, json=body, headers=headers)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.url, json=body, headers=headers)
        response.raise_for_status()


def get_notifier(settings: Settings | None = None) -> Notifier:
    settings = settings or get_settings()
    if not settings.notifier_webhook_url:
        logger.warning("Notifier webhook is not configured; notifications will only be logged")
        return LoggingNotifier()
    return WebhookNotifier(settings.notifier_webhook_url, api_key=settings.notifier_api_key)


def enqueue(db: Session, obligation: NotificationObligation) -> models.NotificationOutbox:
    """Stage an obligation in the caller's transaction."""
    entry = models.NotificationOutbox(
        booking_id=obligation.booking_id,
        kind=obligation.kind,
        payload=obligation.to_payload(),
        status=OutboxStatus.pending,
        attempts=0,
    )
    db.add(entry)
    return entry


def dispatch_pending(
    db: Session,
    notifier: Notifier,
    *,
    max_attempts: int | None = None,
    batch_size: int = OUTBOX_BATCH_SIZE,
) -> int:
    """Deliver pending outbox rows. Returns how many were sent."""
    if max_attempts is None:
        max_attempts = get_settings().outbox_max_attempts
    entries = (
        db.execute(
            select(models.NotificationOutbox)
            .where(models.NotificationOutbox.status == OutboxStatus.pending)
            .order_by(models.NotificationOutbox.id)
            .limit(batch_size)
        )
        .scalars()
        .all()
    )
    sent = 0
    for entry in entries:
        obligation = NotificationObligation.from_payload(entry.kind, entry.payload)
        entry.attempts = (entry.attempts or 0) + 1
        try:
            notifier.send(obligation)
        except Exception as exc:
            entry.last_error = str(exc)
            if entry.attempts >= max_attempts:
                entry.status = OutboxStatus.failed
            logger.exception(
                "Failed to deliver notification",
                extra={"outbox_id": entry.id, "attempts": entry.attempts},
            )
            continue
        entry.status = OutboxStatus.sent
        entry.sent_at = datetime.now(timezone.utc)
        entry.last_error = None
        sent += 1
    db.commit()
    return sent
