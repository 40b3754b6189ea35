from .service import Service
from .time_slot import TimeSlot
from .blocked_date import BlockedDate
from .booking import Booking, BookingStatus
from .slot_occupancy import SlotOccupancy
from .notification import NotificationOutbox, NotificationKind, OutboxStatus
