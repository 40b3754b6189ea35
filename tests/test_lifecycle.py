from datetime import date, datetime, timezone

import pytest
from chillthrive.core.clock import FixedClock
from chillthrive.db import models
from chillthrive.db.models import BookingStatus, NotificationKind
from chillthrive.services import lifecycle
from chillthrive.services.availability_service import AvailabilityCalculator
from chillthrive.services.booking_service import Customer, ReservationCoordinator
from chillthrive.services.calendar_policy import CalendarPolicy
from chillthrive.services.errors import InvalidTransition, NotFound

DAY = date(2025, 5, 21)


@pytest.fixture()
def booked(db_session, clock, make_service, make_slot):
    """A pending booking for the only seat of 10:00 AM."""
    service = make_service(name="Ice Bath Therapy")
    make_slot("10:00 AM", capacity=1)
    policy = CalendarPolicy(db_session, clock=clock, closed_weekday=6)
    coordinator = ReservationCoordinator(db_session, policy=policy)
    booking = coordinator.reserve(
        DAY,
        "10:00 AM",
        service.id,
        Customer(name="Asha", email="Asha@Example.com", phone="9876543210"),
    )
    return coordinator, booking


def outbox_kinds(session):
    return [entry.kind for entry in session.query(models.NotificationOutbox).order_by(models.NotificationOutbox.id)]


def test_confirm_emits_confirmed_notification(db_session, clock, booked):
    _, booking = booked

    result = lifecycle.transition_booking(db_session, booking.id, BookingStatus.confirmed, clock=clock)

    assert result.booking.status == BookingStatus.confirmed
    assert result.obligation.kind == NotificationKind.confirmed
    assert result.obligation.feedback_reference is None
    assert outbox_kinds(db_session) == [NotificationKind.received, NotificationKind.confirmed]


def test_complete_emits_one_feedback_request(db_session, clock, booked):
    _, booking = booked
    lifecycle.transition_booking(db_session, booking.id, BookingStatus.confirmed, clock=clock)

    result = lifecycle.transition_booking(
        db_session,
        booking.id,
        BookingStatus.completed,
        feedback_reference="https://maps.example.com/review",
        clock=clock,
    )

    obligation = result.obligation
    assert result.booking.status == BookingStatus.completed
    assert obligation.kind == NotificationKind.completed
    assert obligation.service_name == "Ice Bath Therapy"
    assert obligation.booking_date == DAY
    assert obligation.time_slot == "10:00 AM"
    assert obligation.feedback_reference == "https://maps.example.com/review"
    assert outbox_kinds(db_session).count(NotificationKind.completed) == 1


def test_transition_stamps_updated_at(db_session, booked):
    _, booking = booked
    later = FixedClock(datetime(2025, 5, 20, 9, 30, tzinfo=timezone.utc))

    result = lifecycle.transition_booking(db_session, booking.id, BookingStatus.confirmed, clock=later)

    assert result.booking.updated_at.replace(tzinfo=timezone.utc) == later.now()


@pytest.mark.parametrize(
    "path, target",
    [
        ([], BookingStatus.completed),
        ([], BookingStatus.pending),
        ([BookingStatus.confirmed], BookingStatus.pending),
        ([BookingStatus.confirmed], BookingStatus.confirmed),
        ([BookingStatus.confirmed, BookingStatus.completed], BookingStatus.cancelled),
        ([BookingStatus.confirmed, BookingStatus.completed], BookingStatus.confirmed),
        ([BookingStatus.cancelled], BookingStatus.confirmed),
        ([BookingStatus.cancelled], BookingStatus.cancelled),
    ],
)
def test_illegal_transitions_leave_booking_untouched(db_session, clock, booked, path, target):
    _, booking = booked
    for step in path:
        lifecycle.transition_booking(db_session, booking.id, step, clock=clock)
    db_session.refresh(booking)
    before = (booking.status, booking.updated_at)
    notifications = db_session.query(models.NotificationOutbox).count()

    with pytest.raises(InvalidTransition):
        lifecycle.transition_booking(db_session, booking.id, target, clock=clock)

    db_session.refresh(booking)
    assert (booking.status, booking.updated_at) == before
    assert db_session.query(models.NotificationOutbox).count() == notifications


def test_cancellation_frees_the_seat(db_session, clock, booked):
    coordinator, booking = booked
    calculator = AvailabilityCalculator(db_session, policy=coordinator.policy)
    assert calculator.availability(DAY) == {"10:00 AM": 0}

    result = lifecycle.transition_booking(
        db_session, booking.id, BookingStatus.cancelled, actor="admin", clock=clock
    )

    assert result.obligation is None
    assert result.booking.cancelled_by == "admin"
    assert calculator.availability(DAY) == {"10:00 AM": 1}
    again = coordinator.reserve(
        DAY,
        "10:00 AM",
        booking.service_id,
        Customer(name="Ravi", email="ravi@example.com", phone="9876500000"),
    )
    assert again.status == BookingStatus.pending


def test_customer_can_cancel_with_their_email(db_session, clock, booked):
    _, booking = booked

    result = lifecycle.cancel_by_customer(db_session, booking.id, " asha@example.com ", clock=clock)

    assert result.booking.status == BookingStatus.cancelled
    assert result.booking.cancelled_by == "customer"


def test_customer_cancel_with_wrong_email_is_not_found(db_session, clock, booked):
    _, booking = booked

    with pytest.raises(NotFound):
        lifecycle.cancel_by_customer(db_session, booking.id, "someone@example.com", clock=clock)

    db_session.refresh(booking)
    assert booking.status == BookingStatus.pending


def test_missing_booking_is_not_found(db_session, clock):
    with pytest.raises(NotFound):
        lifecycle.transition_booking(db_session, 404, BookingStatus.confirmed, clock=clock)


def test_plan_transition_only_attaches_feedback_to_completion(db_session, booked):
    _, booking = booked

    plan = lifecycle.plan_transition(
        booking, BookingStatus.confirmed, feedback_reference="https://maps.example.com/review"
    )

    assert plan.source == BookingStatus.pending
    assert plan.obligation.feedback_reference is None
