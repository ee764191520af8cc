from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCTimestamp(TypeDecorator):
    """Timezone-aware ``DateTime`` column.

    Values are written in UTC.  Backends without timezone support (SQLite)
    hand back naive values, which are tagged as UTC on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)


class Timestamps(SQLModel):
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCTimestamp)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCTimestamp)

    # soft delete: set instead of removing the row
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=UTCTimestamp)


class RecordRead(Timestamps):
    id: int
