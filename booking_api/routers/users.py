from fastapi import APIRouter, Depends, status

from booking_api.dependencies import get_appointment_manager, get_current_user, get_user_manager
from booking_api.domain.records import AppointmentManager, UserManager
from booking_api.models.user import User, UserCreate, UserPatch, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserRead)
def create_user(user: UserCreate, users: UserManager = Depends(get_user_manager)):
    return users.create(user)


@router.get("", response_model=list[UserRead])
def list_users(users: UserManager = Depends(get_user_manager)):
    return users.get_all()


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/{user_ref}", response_model=UserRead)
def get_user(user_ref: str, users: UserManager = Depends(get_user_manager)):
    return users.get_by_ref(user_ref)


# PATCH semantics: omitted fields keep their stored value
@router.put("/{user_ref}", response_model=UserRead)
def update_user(
    user_ref: str,
    patch: UserPatch,
    users: UserManager = Depends(get_user_manager),
):
    user = users.get_by_ref(user_ref)
    return users.update(user.id, patch)


@router.delete("/{user_ref}", response_model=UserRead)
def delete_user(user_ref: str, users: UserManager = Depends(get_user_manager)):
    user = users.get_by_ref(user_ref)
    return users.delete(user.id)


# =========================
# USER APPOINTMENTS
# =========================

@router.get("/{user_ref}/appointments")
def list_user_appointments(
    user_ref: str,
    users: UserManager = Depends(get_user_manager),
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    user = users.get_by_ref(user_ref)
    return appointments.service_appointments(user.id)


@router.get("/{user_ref}/services/{service_id}")
def has_service_appointment(
    user_ref: str,
    service_id: int,
    users: UserManager = Depends(get_user_manager),
    appointments: AppointmentManager = Depends(get_appointment_manager),
):
    user = users.get_by_ref(user_ref)
    return {
        "user_id": user.id,
        "service_id": service_id,
        "booked": appointments.has_service_appointment(user.id, service_id),
    }
