from datetime import date
from pydantic import BaseModel


class BlockedDateCreate(BaseModel):
    blocked_date: date
    reason: str | None = None


class BlockedDate(BlockedDateCreate):
    id: int

    class Config:
        from_attributes = True
