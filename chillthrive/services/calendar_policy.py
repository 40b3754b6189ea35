from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.clock import Clock, SystemClock
from ..db import models
from .errors import DuplicateBlockedDate, NotFound, is_unique_violation

logger = logging.getLogger(__name__)


class CalendarPolicy:
    """Decides which calendar dates accept bookings at all."""

    def __init__(
        self,
        db: Session,
        clock: Clock | None = None,
        closed_weekday: int | None = None,
    ) -> None:
        self.db = db
        self.clock = clock or SystemClock()
        if closed_weekday is None:
            closed_weekday = get_settings().closed_weekday
        self.closed_weekday = closed_weekday

    def is_blocked(self, day: date) -> bool:
        return (
            self.db.scalar(
                select(models.BlockedDate.id).where(models.BlockedDate.blocked_date == day)
            )
            is not None
        )

    def is_bookable(self, day: date) -> bool:
        if day < self.clock.today():
            return False
        if day.weekday() == self.closed_weekday:
            return False
        return not self.is_blocked(day)

    def list_blocked_dates(self) -> list[models.BlockedDate]:
        stmt = select(models.BlockedDate).order_by(models.BlockedDate.blocked_date)
        return list(self.db.execute(stmt).scalars().all())

    def block_date(self, day: date, reason: str | None = None) -> models.BlockedDate:
        blocked = models.BlockedDate(blocked_date=day, reason=reason or None)
        self.db.add(blocked)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if not is_unique_violation(exc):
                raise
            raise DuplicateBlockedDate("This date is already blocked") from exc
        self.db.refresh(blocked)
        logger.info("Blocked date %s", day.isoformat(), extra={"reason": reason})
        return blocked

    def unblock_date(self, blocked_id: int) -> None:
        blocked = self.db.get(models.BlockedDate, blocked_id)
        if blocked is None:
            raise NotFound("Blocked date not found")
        day = blocked.blocked_date
        self.db.delete(blocked)
        self.db.commit()
        logger.info("Unblocked date %s", day.isoformat())
