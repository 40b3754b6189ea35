from . import (
    availability,
    blocked_dates,
    bookings,
    services,
    slots,
)

__all__ = [
    "availability",
    "blocked_dates",
    "bookings",
    "services",
    "slots",
]
