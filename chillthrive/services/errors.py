class BookingError(Exception):
    kind = "booking_error"


class Unbookable(BookingError):
    kind = "unbookable"


class SlotFull(BookingError):
    kind = "slot_full"


class Transient(BookingError):
    """Infrastructure failure; the same request may be retried."""

    kind = "transient"


class InvalidTransition(BookingError):
    kind = "invalid_transition"


class NotFound(BookingError):
    kind = "not_found"


class DuplicateBlockedDate(BookingError):
    kind = "duplicate_blocked_date"


class DuplicateTimeSlot(BookingError):
    kind = "duplicate_time_slot"


def is_unique_violation(exc) -> bool:
    """True when an ``IntegrityError`` comes from a unique constraint."""
    orig = getattr(exc, "orig", None)
    # psycopg2 exposes the SQLSTATE, sqlite only the message
    if getattr(orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(orig)


__all__ = [
    "BookingError",
    "Unbookable",
    "SlotFull",
    "Transient",
    "InvalidTransition",
    "NotFound",
    "DuplicateBlockedDate",
    "DuplicateTimeSlot",
    "is_unique_violation",
]
