from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from time import monotonic

from sqlalchemy import func, select, text, update
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.clock import Clock, SystemClock
from ..core.constants import DEFAULT_PAYMENT_STATUS
from ..db import models
from ..db.models.notification import NotificationKind
from .calendar_policy import CalendarPolicy
from .errors import BookingError, NotFound, SlotFull, Transient, Unbookable
from .notification_service import NotificationObligation, enqueue
from .slot_catalog import SlotCatalog

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Customer:
    name: str
    email: str
    phone: str

    def __post_init__(self) -> None:
        if not (self.name.strip() and self.email.strip() and self.phone.strip()):
            raise ValueError("Customer name, email and phone are required")


def _occupancy_key(day: date, label: str):
    return (
        models.SlotOccupancy.booking_date == day,
        models.SlotOccupancy.time_slot == label,
    )


def release_seat(db: Session, day: date, label: str) -> None:
    """Give back one seat for (day, label) inside the caller's transaction."""
    db.execute(
        update(models.SlotOccupancy)
        .where(*_occupancy_key(day, label), models.SlotOccupancy.booked > 0)
        .values(booked=models.SlotOccupancy.booked - 1)
        .execution_options(synchronize_session=False)
    )


class ReservationCoordinator:
    """Commits bookings so a (date, slot) never holds more than its capacity.

    Admission goes through a single conditional UPDATE on the
    ``slot_occupancy`` row for the key::

        UPDATE slot_occupancy SET booked = booked + 1
        WHERE booking_date = :d AND time_slot = :s AND booked < :capacity

    The row lock taken by that statement serialises callers racing for the
    same key while leaving other keys untouched. The booking insert and its
    ``received`` notification ride in the same transaction, so a failure
    leaves nothing behind.
    """

    def __init__(
        self,
        db: Session,
        policy: CalendarPolicy | None = None,
        catalog: SlotCatalog | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.db = db
        self.clock = clock or (policy.clock if policy else SystemClock())
        self.policy = policy or CalendarPolicy(db, clock=self.clock)
        self.catalog = catalog or SlotCatalog(db)

    def reserve(
        self,
        day: date,
        slot_label: str,
        service_id: int,
        customer: Customer,
        notes: str | None = None,
        timeout: float | None = None,
    ) -> models.Booking:
        slot_label = slot_label.strip()
        if not self.policy.is_bookable(day):
            raise Unbookable("This date is not available")
        capacity, found = self.catalog.capacity_of(slot_label)
        if not found:
            raise Unbookable("This time slot is not available")
        service = self.db.get(models.Service, service_id)
        if service is None or not service.is_active:
            raise Unbookable("This service is not available")
        price = service.price
        service_name = service.name

        deadline = monotonic() + timeout if timeout is not None else None
        try:
            self._ensure_counter(day, slot_label)
            self._check_deadline(deadline)
            self._apply_lock_timeout(timeout)
            admitted = self.db.execute(
                update(models.SlotOccupancy)
                .where(
                    *_occupancy_key(day, slot_label),
                    models.SlotOccupancy.booked < capacity,
                )
                .values(booked=models.SlotOccupancy.booked + 1)
                .execution_options(synchronize_session=False)
            )
            if admitted.rowcount != 1:
                raise SlotFull("This slot just filled up, please choose another")
            now = self.clock.now()
            booking = models.Booking(
                service_id=service_id,
                customer_name=customer.name.strip(),
                customer_email=customer.email.strip(),
                customer_phone=customer.phone.strip(),
                booking_date=day,
                time_slot=slot_label,
                status=models.BookingStatus.pending,
                payment_status=DEFAULT_PAYMENT_STATUS,
                payment_amount=price,
                notes=notes,
                created_at=now,
                updated_at=now,
            )
            self.db.add(booking)
            self.db.flush()
            enqueue(
                self.db,
                NotificationObligation.for_booking(
                    NotificationKind.received, booking, service_name=service_name
                ),
            )
            self._check_deadline(deadline)
            self.db.commit()
        except BookingError:
            self.db.rollback()
            raise
        except (OperationalError, PoolTimeoutError) as exc:
            self.db.rollback()
            logger.warning(
                "Reservation aborted by database",
                extra={"booking_date": day.isoformat(), "time_slot": slot_label},
            )
            raise Transient("Temporary error, please retry") from exc
        except DBAPIError as exc:
            self.db.rollback()
            if exc.connection_invalidated:
                raise Transient("Temporary error, please retry") from exc
            raise
        logger.info(
            "Booking reserved",
            extra={
                "booking_id": booking.id,
                "booking_date": day.isoformat(),
                "time_slot": slot_label,
            },
        )
        return booking

    def _ensure_counter(self, day: date, label: str) -> None:
        existing = self.db.scalar(
            select(models.SlotOccupancy.id).where(*_occupancy_key(day, label))
        )
        if existing is not None:
            return
        # seed from bookings that predate the counter row
        booked = self.db.scalar(
            select(func.count(models.Booking.id)).where(
                models.Booking.booking_date == day,
                models.Booking.time_slot == label,
                models.Booking.status != models.BookingStatus.cancelled,
            )
        )
        self.db.add(models.SlotOccupancy(booking_date=day, time_slot=label, booked=booked or 0))
        try:
            self.db.commit()
        except IntegrityError:
            # another request created it first
            self.db.rollback()

    def _apply_lock_timeout(self, timeout: float | None) -> None:
        if self.db.get_bind().dialect.name != "postgresql":
            return
        if timeout is not None:
            timeout_ms = max(int(timeout * 1000), 1)
        else:
            timeout_ms = get_settings().reservation_lock_timeout_ms
        self.db.execute(text(f"SET LOCAL lock_timeout = {int(timeout_ms)}"))

    @staticmethod
    def _check_deadline(deadline: float | None) -> None:
        if deadline is not None and monotonic() > deadline:
            raise Transient("Reservation deadline exceeded, please retry")


def delete_booking(db: Session, booking_id: int) -> None:
    booking = db.get(models.Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    if booking.status != models.BookingStatus.cancelled:
        release_seat(db, booking.booking_date, booking.time_slot)
    db.delete(booking)
    db.commit()
    logger.info("Booking deleted", extra={"booking_id": booking_id})
