from datetime import date
from sqlalchemy import CheckConstraint, Date, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from ..session import Base


class SlotOccupancy(Base):
    """Seats held by non-cancelled bookings for one (date, slot label)."""

    __tablename__ = "slot_occupancy"
    __table_args__ = (
        UniqueConstraint("booking_date", "time_slot", name="uq_slot_occupancy_key"),
        CheckConstraint("booked >= 0", name="ck_slot_occupancy_booked_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(String(32), nullable=False)
    booked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
