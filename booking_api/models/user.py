from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
from sqlmodel import SQLModel, Field

from booking_api.models.base import RecordRead, Timestamps


class AccountType(str, Enum):
    individual = "individual"
    business = "business"
    system = "system"


class UserBase(SQLModel):
    email: str = Field(index=True, unique=True)
    account_type: AccountType = AccountType.individual
    first_name: str
    last_name: str
    business_id: Optional[int] = Field(default=None, foreign_key="user.id")


class User(UserBase, Timestamps, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str


class UserCreate(UserBase):
    password: str


class UserRead(UserBase, RecordRead):
    pass


class UserPatch(BaseModel):
    """Fields a client may change on a user; omitted keys stay as they are."""

    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    password: Optional[str] = None
    account_type: Optional[AccountType] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    business_id: Optional[int] = None
