import datetime
from pydantic import BaseModel


class DateBookable(BaseModel):
    date: datetime.date
    is_bookable: bool


class Availability(BaseModel):
    date: datetime.date
    slots: dict[str, int]


class SlotOverview(BaseModel):
    slot_time: str
    capacity: int
    booked: int
    remaining: int


class DayOverview(BaseModel):
    date: datetime.date
    is_bookable: bool
    slots: list[SlotOverview]
