from typing import Any

from fastapi import APIRouter, Body, Depends

from booking_api.dependencies import get_authenticator
from booking_api.domain.auth import AccessToken, Authenticator

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=AccessToken)
def login(
    payload: Any = Body(...),
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Exchange ``{"email", "password"}`` for a bearer token."""
    return authenticator.authenticate(payload)
