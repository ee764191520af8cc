from typing import Optional

from fastapi import APIRouter, Depends, status

from booking_api.dependencies import get_appointment_manager
from booking_api.domain.records import AppointmentManager
from booking_api.models.appointment import AppointmentCreate, AppointmentPatch, AppointmentRead


router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AppointmentRead)
def create_appointment(
    appointment: AppointmentCreate,
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    return appointments.create(appointment)


@router.get("", response_model=list[AppointmentRead])
def list_appointments(
    user_id: Optional[int] = None,
    service_id: Optional[int] = None,
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    criteria = {"user_id": user_id, "service_id": service_id}
    return appointments.get_all(**{name: value for name, value in criteria.items() if value is not None})


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: int,
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    return appointments.get(appointment_id)


# {"active": false} cancels; cancel_date_time is filled in
@router.put("/{appointment_id}", response_model=AppointmentRead)
def update_appointment(
    appointment_id: int,
    patch: AppointmentPatch,
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    return appointments.update(appointment_id, patch)


@router.delete("/{appointment_id}", response_model=AppointmentRead)
def delete_appointment(
    appointment_id: int,
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    return appointments.delete(appointment_id)
