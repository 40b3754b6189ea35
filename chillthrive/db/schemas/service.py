from pydantic import BaseModel, Field, field_validator


class ServiceBase(BaseModel):
    name: str = Field(min_length=1)
    short_description: str | None = None
    description: str | None = None
    price: int = Field(gt=0)
    duration_minutes: int = Field(default=60, gt=0)
    is_active: bool = True
    is_combo: bool = False
    display_order: int = 0


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    short_description: str | None = None
    description: str | None = None
    price: int | None = Field(default=None, gt=0)
    duration_minutes: int | None = Field(default=None, gt=0)
    is_active: bool | None = None
    is_combo: bool | None = None
    display_order: int | None = None

    @field_validator("name", "price", "duration_minutes", "is_active", "is_combo", "display_order")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class Service(ServiceBase):
    id: int

    class Config:
        from_attributes = True
