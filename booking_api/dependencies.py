from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from booking_api.core.config import Settings
from booking_api.database import get_session
from booking_api.domain.auth import Authenticator
from booking_api.domain.records import AppointmentManager, InvoiceManager, ServiceManager, UserManager
from booking_api.models.appointment import Appointment
from booking_api.models.invoice import Invoice
from booking_api.models.service import Service
from booking_api.models.user import AccountType, User
from booking_api.repositories.store import SQLModelStore


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# =========================
# MANAGERS
# =========================

def get_user_manager(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> UserManager:
    return UserManager(SQLModelStore(session, User), debug=settings.debug)


def get_service_manager(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> ServiceManager:
    return ServiceManager(SQLModelStore(session, Service), debug=settings.debug)


def get_appointment_manager(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AppointmentManager:
    return AppointmentManager(
        SQLModelStore(session, Appointment),
        services=SQLModelStore(session, Service),
        users=SQLModelStore(session, User),
        debug=settings.debug,
    )


def get_invoice_manager(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> InvoiceManager:
    return InvoiceManager(
        SQLModelStore(session, Invoice),
        appointments=SQLModelStore(session, Appointment),
        debug=settings.debug,
    )


def get_authenticator(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> Authenticator:
    return Authenticator(SQLModelStore(session, User), settings)


# =========================
# AUTHENTICATED USER
# =========================

def get_current_user(
    token: str = Depends(oauth2_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
) -> User:
    return authenticator.current_user(token)


def get_current_business(
    current_user: User = Depends(get_current_user),
) -> User:

    if current_user.account_type != AccountType.business:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only business accounts can access this route",
        )

    return current_user
