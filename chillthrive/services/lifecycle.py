"""Booking status state machine.

``pending -> confirmed | cancelled`` and ``confirmed -> completed | cancelled``
are the only legal moves; ``completed`` and ``cancelled`` are terminal.
Confirming and completing produce a notification obligation which is staged
in the outbox together with the status change and handed back to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.clock import Clock, SystemClock
from ..core.constants import CUSTOMER_ACTOR
from ..db import models
from ..db.models.booking import BookingStatus
from ..db.models.notification import NotificationKind
from .booking_service import release_seat
from .errors import InvalidTransition, NotFound
from .notification_service import NotificationObligation, enqueue

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[BookingStatus, dict[BookingStatus, NotificationKind | None]] = {
    BookingStatus.pending: {
        BookingStatus.confirmed: NotificationKind.confirmed,
        BookingStatus.cancelled: None,
    },
    BookingStatus.confirmed: {
        BookingStatus.completed: NotificationKind.completed,
        BookingStatus.cancelled: None,
    },
}


@dataclass(slots=True, frozen=True)
class TransitionPlan:
    source: BookingStatus
    target: BookingStatus
    obligation: NotificationObligation | None


@dataclass(slots=True)
class TransitionResult:
    booking: models.Booking
    obligation: NotificationObligation | None


def plan_transition(
    booking: models.Booking,
    target: BookingStatus,
    *,
    feedback_reference: str | None = None,
) -> TransitionPlan:
    source = BookingStatus(booking.status)
    target = BookingStatus(target)
    allowed = ALLOWED_TRANSITIONS.get(source, {})
    if target not in allowed:
        raise InvalidTransition(f"Cannot move booking from {source.value} to {target.value}")
    kind = allowed[target]
    obligation = None
    if kind is not None:
        obligation = NotificationObligation.for_booking(
            kind,
            booking,
            feedback_reference=feedback_reference if kind == NotificationKind.completed else None,
        )
    return TransitionPlan(source=source, target=target, obligation=obligation)


def transition_booking(
    db: Session,
    booking_id: int,
    target: BookingStatus,
    *,
    feedback_reference: str | None = None,
    actor: str | None = None,
    clock: Clock | None = None,
) -> TransitionResult:
    booking = db.get(models.Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    if feedback_reference is None:
        feedback_reference = get_settings().feedback_url or None
    plan = plan_transition(booking, target, feedback_reference=feedback_reference)
    booking_date = booking.booking_date
    time_slot = booking.time_slot
    now = (clock or SystemClock()).now()

    values = {"status": plan.target, "updated_at": now}
    if plan.target == BookingStatus.cancelled:
        values["cancelled_by"] = actor
    # guarded on the status we planned from so concurrent moves cannot both win
    moved = db.execute(
        update(models.Booking)
        .where(models.Booking.id == booking_id, models.Booking.status == plan.source)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if moved.rowcount != 1:
        db.rollback()
        raise InvalidTransition("Booking status changed concurrently")
    if plan.target == BookingStatus.cancelled:
        release_seat(db, booking_date, time_slot)
    if plan.obligation is not None:
        enqueue(db, plan.obligation)
    db.commit()
    db.refresh(booking)
    logger.info(
        "Booking status changed",
        extra={
            "booking_id": booking_id,
            "from_status": plan.source.value,
            "to_status": plan.target.value,
            "actor": actor,
        },
    )
    return TransitionResult(booking=booking, obligation=plan.obligation)


def cancel_by_customer(
    db: Session,
    booking_id: int,
    customer_email: str,
    *,
    clock: Clock | None = None,
) -> TransitionResult:
    booking = db.get(models.Booking, booking_id)
    if booking is None or booking.customer_email.strip().lower() != customer_email.strip().lower():
        raise NotFound("Booking not found")
    return transition_booking(
        db,
        booking_id,
        BookingStatus.cancelled,
        actor=CUSTOMER_ACTOR,
        clock=clock,
    )
