from . import (
    availability_service,
    booking_service,
    calendar_policy,
    lifecycle,
    notification_service,
    service_catalog,
    slot_catalog,
)

__all__ = [
    "availability_service",
    "booking_service",
    "calendar_policy",
    "lifecycle",
    "notification_service",
    "service_catalog",
    "slot_catalog",
]
