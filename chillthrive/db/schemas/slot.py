from pydantic import BaseModel, Field, field_validator


def _clean_label(value: str | None) -> str:
    if value is None or not value.strip():
        raise ValueError("Slot time is required")
    return value.strip()


class TimeSlotBase(BaseModel):
    slot_time: str = Field(min_length=1, max_length=32)
    capacity: int = Field(default=1, ge=1)
    is_active: bool = True

    @field_validator("slot_time")
    @classmethod
    def strip_label(cls, value: str) -> str:
        return _clean_label(value)


class TimeSlotCreate(TimeSlotBase):
    pass


class TimeSlotUpdate(BaseModel):
    slot_time: str | None = Field(default=None, min_length=1, max_length=32)
    capacity: int | None = Field(default=None, ge=1)
    is_active: bool | None = None

    # omitted fields stay as they are; an explicit null is rejected
    @field_validator("slot_time")
    @classmethod
    def strip_label(cls, value: str | None) -> str:
        return _clean_label(value)

    @field_validator("capacity", "is_active")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class TimeSlot(TimeSlotBase):
    id: int

    class Config:
        from_attributes = True
