"""Lifecycle of stored records: create, patch-update and soft delete.

``RecordManager`` holds the workflow shared by every record type:

* ``update`` fetches the live record first, so an unknown id raises
  ``NotFoundError`` before anything is written.
* Only the fields the client actually sent are applied.  A field that is
  missing from the patch keeps its value.  A field sent as ``""`` or
  ``null`` is set to exactly that (``null`` is refused for required
  columns).
* An empty patch returns the record as stored.
* ``delete`` tombstones the record; it stays readable by id.

The subclasses add the rules of each record type.
"""

import logging
from typing import Any, Generic, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel

from booking_api.core.errors import NotFoundError, ValidationError
from booking_api.core.security import hash_password
from booking_api.models.appointment import Appointment
from booking_api.models.base import utc_now
from booking_api.models.invoice import Invoice, invoice_status
from booking_api.models.service import Service
from booking_api.models.user import AccountType, User
from booking_api.repositories.store import ModelT, Store


logger = logging.getLogger(__name__)


class RecordManager(Generic[ModelT]):
    label = "Record"

    # columns that may not be patched to null
    required_fields: tuple[str, ...] = ()
    non_negative_fields: tuple[str, ...] = ()

    def __init__(self, store: Store[ModelT], debug: bool = False):
        self.store = store
        self.debug = debug

    def get(self, record_id: int) -> ModelT:
        return self.store.get(record_id)

    def get_all(self, **criteria: Any) -> list[ModelT]:
        return self.store.find_all(**criteria)

    def create(self, payload: SQLModel) -> ModelT:
        return self._create(payload.model_dump())

    def update(self, record_id: int, patch: BaseModel) -> ModelT:
        current = self.store.get(record_id, include_deleted=False)

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            return current

        self._validate(changes)
        changes = self.prepare_update(current, changes)

        record = self.store.update(record_id, changes)
        logger.info("%s ID (%d) updated: %s", self.label, record_id, ", ".join(sorted(changes)))
        return record

    def delete(self, record_id: int) -> ModelT:
        if self.debug:
            target = self.store.get(record_id, include_deleted=False)
            logger.debug("%s targeted for deletion: %r", self.label, target)

        record = self.store.delete(record_id)
        logger.info("%s ID (%d) deleted.", self.label, record_id)
        return record

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def prepare_update(self, current: ModelT, changes: dict[str, Any]) -> dict[str, Any]:
        return changes

    def _create(self, data: dict[str, Any]) -> ModelT:
        data = self.prepare_create(data)
        self._validate(data)

        record = self.store.create(self.store.model(**data))
        logger.info("%s ID (%d) created.", self.label, record.id)
        return record

    def _validate(self, data: dict[str, Any]) -> None:
        for name in self.required_fields:
            if name in data and data[name] is None:
                raise ValidationError(f"{self.label} field '{name}' cannot be null.")

        for name in self.non_negative_fields:
            value = data.get(name)
            if value is not None and value < 0:
                raise ValidationError(f"{self.label} field '{name}' cannot be negative.")


def require(store: Store, record_id: int, field: str):
    """Fetch a live referenced record or fail validation."""
    try:
        return store.get(record_id, include_deleted=False)
    except NotFoundError as exc:
        raise ValidationError(f"'{field}' refers to a missing record. [{exc.message}]") from exc


# =========================
# USERS
# =========================

class UserManager(RecordManager[User]):
    label = "User"
    required_fields = ("email", "password", "account_type", "first_name", "last_name")

    def get_by_ref(self, user_ref: str) -> User:
        """Look a user up by numeric id or by email."""
        if user_ref.isdigit():
            return self.get(int(user_ref))

        user = self.store.find_one(email=user_ref)
        if user is None:
            raise NotFoundError(f"User with email ({user_ref}) does not exist in the database.")
        return user

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        self._check_email(data["email"])
        self._check_business(data.get("business_id"))

        data["password_hash"] = hash_password(data.pop("password"))
        return data

    def prepare_update(self, current: User, changes: dict[str, Any]) -> dict[str, Any]:
        if "email" in changes:
            self._check_email(changes["email"], user_id=current.id)

        if changes.get("business_id") is not None:
            self._check_business(changes["business_id"])

        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))

        return changes

    def _check_email(self, email: str, user_id: Optional[int] = None) -> None:
        if "@" not in email:
            raise ValidationError(f"'{email}' is not a valid email address.")

        # tombstoned users keep their email
        taken = self.store.find_all(include_deleted=True, email=email)
        if any(user.id != user_id for user in taken):
            raise ValidationError(f"Email ({email}) is already registered.")

    def _check_business(self, business_id: Optional[int]) -> None:
        if business_id is None:
            return

        business = require(self.store, business_id, "business_id")
        if business.account_type != AccountType.business:
            raise ValidationError(f"User ID ({business_id}) is not a business account.")


# =========================
# SERVICES
# =========================

class ServiceManager(RecordManager[Service]):
    label = "Service"
    required_fields = ("name", "description", "start_date_time", "length", "capacity", "cancel_fee", "price")
    non_negative_fields = ("length", "capacity", "cancel_fee", "price")

    def create(self, payload: SQLModel, business_id: int) -> Service:
        data = payload.model_dump()
        data["business_id"] = business_id
        return self._create(data)


# =========================
# APPOINTMENTS
# =========================

class AppointmentManager(RecordManager[Appointment]):
    label = "Appointment"
    required_fields = ("service_id", "user_id", "active")

    def __init__(
        self,
        store: Store[Appointment],
        services: Store[Service],
        users: Store[User],
        debug: bool = False,
    ):
        super().__init__(store, debug=debug)
        self.services = services
        self.users = users

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        require(self.users, data["user_id"], "user_id")
        require(self.services, data["service_id"], "service_id")

        # a supplied cancellation time wins over the default active flag
        if data["cancel_date_time"] is not None:
            data["active"] = False
        elif not data["active"]:
            data["cancel_date_time"] = utc_now()

        if data["active"]:
            self._check_booking(data["user_id"], data["service_id"])

        return data

    def prepare_update(self, current: Appointment, changes: dict[str, Any]) -> dict[str, Any]:
        if "user_id" in changes:
            require(self.users, changes["user_id"], "user_id")
        if "service_id" in changes:
            require(self.services, changes["service_id"], "service_id")

        if "active" in changes:
            if changes["active"]:
                changes["cancel_date_time"] = None
            elif changes.get("cancel_date_time") is None:
                changes["cancel_date_time"] = current.cancel_date_time or utc_now()
        elif "cancel_date_time" in changes:
            changes["active"] = changes["cancel_date_time"] is None

        user_id = changes.get("user_id", current.user_id)
        service_id = changes.get("service_id", current.service_id)
        active = changes.get("active", current.active)

        rebooked = (user_id, service_id) != (current.user_id, current.service_id)
        if active and (rebooked or not current.active):
            self._check_booking(user_id, service_id, appointment_id=current.id)

        return changes

    def _check_booking(self, user_id: int, service_id: int, appointment_id: Optional[int] = None) -> None:
        booked = [
            appt
            for appt in self.store.find_all(service_id=service_id, active=True)
            if appt.id != appointment_id
        ]

        if any(appt.user_id == user_id for appt in booked):
            raise ValidationError(
                f"User ID ({user_id}) already has an active appointment for Service ID ({service_id})."
            )

        service = self.services.get(service_id, include_deleted=False)
        if service.capacity and len(booked) >= service.capacity:
            raise ValidationError(f"Service ID ({service_id}) is fully booked.")

    def has_service_appointment(self, user_id: int, service_id: int) -> bool:
        return self.store.find_one(user_id=user_id, service_id=service_id) is not None

    def service_appointments(self, user_id: int) -> list[dict[str, Any]]:
        """Each of the user's appointments paired with the service it books."""
        appts = self.store.find_all(user_id=user_id)

        # deleted services still show up in the user's history
        booked = self.services.get_many({appt.service_id for appt in appts}, include_deleted=True)
        services: dict[int, Service] = {service.id: service for service in booked}

        pairs = []
        for appt in appts:
            if appt.service_id not in services:
                raise NotFoundError(
                    f"Service ID ({appt.service_id}) does not exist in the database, "
                    f"but is associated with Appointment ID ({appt.id})."
                )

            pairs.append({"appointment": appt, "service": services[appt.service_id]})

        return pairs


# =========================
# INVOICES
# =========================

class InvoiceManager(RecordManager[Invoice]):
    label = "Invoice"
    required_fields = ("appointment_id", "original_balance", "remaining_balance")
    non_negative_fields = ("original_balance",)

    def __init__(self, store: Store[Invoice], appointments: Store[Appointment], debug: bool = False):
        super().__init__(store, debug=debug)
        self.appointments = appointments

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        require(self.appointments, data["appointment_id"], "appointment_id")

        if data.get("remaining_balance") is None:
            data["remaining_balance"] = data["original_balance"]

        data["status"] = invoice_status(data["remaining_balance"])
        return data

    def prepare_update(self, current: Invoice, changes: dict[str, Any]) -> dict[str, Any]:
        if "appointment_id" in changes:
            require(self.appointments, changes["appointment_id"], "appointment_id")

        changes["status"] = invoice_status(changes.get("remaining_balance", current.remaining_balance))
        return changes
