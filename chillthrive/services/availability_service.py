from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db import models
from .calendar_policy import CalendarPolicy
from .slot_catalog import SlotCatalog


def booked_counts(db: Session, day: date) -> dict[str, int]:
    """Non-cancelled bookings per slot label for ``day``."""
    rows = db.execute(
        select(models.Booking.time_slot, func.count(models.Booking.id))
        .where(
            models.Booking.booking_date == day,
            models.Booking.status != models.BookingStatus.cancelled,
        )
        .group_by(models.Booking.time_slot)
    ).all()
    return {label: int(count) for label, count in rows}


class AvailabilityCalculator:
    """Advisory view of remaining seats; ``reserve`` re-checks at commit time."""

    def __init__(
        self,
        db: Session,
        policy: CalendarPolicy | None = None,
        catalog: SlotCatalog | None = None,
    ) -> None:
        self.db = db
        self.policy = policy or CalendarPolicy(db)
        self.catalog = catalog or SlotCatalog(db)

    def availability(self, day: date) -> dict[str, int]:
        if not self.policy.is_bookable(day):
            return {}
        booked = booked_counts(self.db, day)
        return {
            label: max(capacity - booked.get(label, 0), 0)
            for label, capacity in self.catalog.active_slots()
        }

    def day_overview(self, day: date) -> dict:
        bookable = self.policy.is_bookable(day)
        booked = booked_counts(self.db, day)
        slots = []
        for label, capacity in self.catalog.active_slots():
            taken = booked.get(label, 0)
            slots.append(
                {
                    "slot_time": label,
                    "capacity": capacity,
                    "booked": taken,
                    "remaining": max(capacity - taken, 0) if bookable else 0,
                }
            )
        return {"date": day, "is_bookable": bookable, "slots": slots}
