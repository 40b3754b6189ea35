from __future__ import annotations

import logging
import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import models, schemas
from .errors import DuplicateTimeSlot, NotFound, is_unique_violation

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])?")


def slot_sort_key(label: str) -> tuple[int, int, str]:
    """Order labels such as "09:00 AM", "14:30" or "10:00-11:00" by start time.

    Labels without a recognisable time sort after all others, by label.
    """
    match = _TIME_RE.match(label)
    if not match:
        return (1, 0, label)
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3)
    if meridiem:
        if not 1 <= hour <= 12:
            return (1, 0, label)
        hour %= 12
        if meridiem.lower() == "pm":
            hour += 12
    if hour > 23 or minute > 59:
        return (1, 0, label)
    return (0, hour * 60 + minute, label)


class SlotCatalog:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_slots(self) -> list[models.TimeSlot]:
        slots = self.db.execute(select(models.TimeSlot)).scalars().all()
        return sorted(slots, key=lambda slot: slot_sort_key(slot.slot_time))

    def active_slots(self) -> list[tuple[str, int]]:
        slots = (
            self.db.execute(select(models.TimeSlot).where(models.TimeSlot.is_active.is_(True)))
            .scalars()
            .all()
        )
        ordered = sorted(slots, key=lambda slot: slot_sort_key(slot.slot_time))
        return [(slot.slot_time, slot.capacity) for slot in ordered]

    def capacity_of(self, label: str) -> tuple[int, bool]:
        capacity = self.db.scalar(
            select(models.TimeSlot.capacity).where(
                models.TimeSlot.slot_time == label,
                models.TimeSlot.is_active.is_(True),
            )
        )
        if capacity is None:
            return 0, False
        return capacity, True

    def get_slot(self, slot_id: int) -> models.TimeSlot:
        slot = self.db.get(models.TimeSlot, slot_id)
        if slot is None:
            raise NotFound("Time slot not found")
        return slot

    def create_slot(self, payload: schemas.TimeSlotCreate) -> models.TimeSlot:
        slot = models.TimeSlot(**payload.model_dump())
        self.db.add(slot)
        self._commit_unique()
        self.db.refresh(slot)
        logger.info("Created time slot", extra={"slot_time": slot.slot_time, "capacity": slot.capacity})
        return slot

    def update_slot(self, slot_id: int, payload: schemas.TimeSlotUpdate) -> models.TimeSlot:
        slot = self.get_slot(slot_id)
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(slot, key, value)
        self._commit_unique()
        self.db.refresh(slot)
        return slot

    def deactivate_slot(self, slot_id: int) -> models.TimeSlot:
        slot = self.get_slot(slot_id)
        slot.is_active = False
        self.db.commit()
        self.db.refresh(slot)
        return slot

    def delete_slot(self, slot_id: int) -> None:
        # bookings keep their own copy of the label
        slot = self.get_slot(slot_id)
        self.db.delete(slot)
        self.db.commit()

    def _commit_unique(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if not is_unique_violation(exc):
                raise
            raise DuplicateTimeSlot("A time slot with this time already exists") from exc
