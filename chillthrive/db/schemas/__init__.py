from .service import Service, ServiceCreate, ServiceUpdate
from .slot import TimeSlot, TimeSlotCreate, TimeSlotUpdate
from .blocked_date import BlockedDate, BlockedDateCreate
from .booking import (
    Booking,
    BookingCancel,
    BookingCreate,
    BookingStats,
    BookingTransition,
    Notification,
    TransitionResult,
)
from .availability import Availability, DateBookable, DayOverview, SlotOverview
