from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from booking_api.models.base import RecordRead, Timestamps, UTCTimestamp, as_utc


class ServiceBase(SQLModel):
    name: str
    description: str = ""
    start_date_time: datetime = Field(index=True, sa_type=UTCTimestamp)

    length: int  # minutes
    capacity: int = 0  # 0 = unlimited

    # cents
    cancel_fee: int = 0
    price: int = 0

    @field_validator("start_date_time")
    @classmethod
    def start_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Service(ServiceBase, Timestamps, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="user.id", index=True)


class ServiceCreate(ServiceBase):
    pass


class ServiceRead(ServiceBase, RecordRead):
    business_id: int


class ServicePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    start_date_time: Optional[datetime] = None
    length: Optional[int] = None
    capacity: Optional[int] = None
    cancel_fee: Optional[int] = None
    price: Optional[int] = None

    @field_validator("start_date_time")
    @classmethod
    def start_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)
