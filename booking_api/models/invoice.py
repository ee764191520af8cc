from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
from sqlmodel import SQLModel, Field

from booking_api.models.base import RecordRead, Timestamps


class InvoiceStatus(str, Enum):
    unpaid = "Unpaid"
    paid = "Paid"
    overpaid = "Overpaid"


def invoice_status(remaining_balance: int) -> InvoiceStatus:
    if remaining_balance > 0:
        return InvoiceStatus.unpaid
    if remaining_balance == 0:
        return InvoiceStatus.paid
    return InvoiceStatus.overpaid


class InvoiceBase(SQLModel):
    appointment_id: int = Field(foreign_key="appointment.id", index=True)

    # cents
    original_balance: int


class Invoice(InvoiceBase, Timestamps, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    remaining_balance: int
    # derived from remaining_balance, never set by clients
    status: InvoiceStatus = Field(default=InvoiceStatus.unpaid, index=True)


class InvoiceCreate(InvoiceBase):
    # defaults to original_balance
    remaining_balance: Optional[int] = None


class InvoiceRead(InvoiceBase, RecordRead):
    remaining_balance: int
    status: InvoiceStatus


class InvoicePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    appointment_id: Optional[int] = None
    original_balance: Optional[int] = None
    remaining_balance: Optional[int] = None
