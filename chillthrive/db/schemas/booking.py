from datetime import date, datetime
from pydantic import BaseModel, Field

from ..models.booking import BookingStatus


class BookingCreate(BaseModel):
    booking_date: date
    time_slot: str = Field(min_length=1)
    service_id: int
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    notes: str | None = None


class BookingTransition(BaseModel):
    status: BookingStatus
    feedback_reference: str | None = None


class BookingCancel(BaseModel):
    customer_email: str = Field(min_length=1)


class Booking(BaseModel):
    id: int
    service_id: int | None = None
    customer_name: str
    customer_email: str
    customer_phone: str
    booking_date: date
    time_slot: str
    status: BookingStatus
    payment_status: str | None = None
    payment_amount: int | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class Notification(BaseModel):
    kind: str
    feedback_reference: str | None = None


class TransitionResult(BaseModel):
    booking: Booking
    notification: Notification | None = None


class BookingStats(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    bookings_today: int
    revenue: int
