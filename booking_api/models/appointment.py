from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from booking_api.models.base import RecordRead, Timestamps, UTCTimestamp, as_utc


class AppointmentBase(SQLModel):
    service_id: int = Field(foreign_key="service.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    # active appointments never carry a cancellation time
    cancel_date_time: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)
    active: bool = Field(default=True, index=True)

    @field_validator("cancel_date_time")
    @classmethod
    def cancel_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class Appointment(AppointmentBase, Timestamps, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)


class AppointmentCreate(AppointmentBase):
    pass


class AppointmentRead(AppointmentBase, RecordRead):
    pass


class AppointmentPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_id: Optional[int] = None
    user_id: Optional[int] = None
    cancel_date_time: Optional[datetime] = None
    active: Optional[bool] = None

    @field_validator("cancel_date_time")
    @classmethod
    def cancel_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)
