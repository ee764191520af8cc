"""Domain errors raised by the stores, managers and the auth workflow.

Each error carries the HTTP status the boundary answers with; the
handler registered in ``booking_api.main`` renders them as
``{"error": message}``.
"""

from fastapi import status


class BookingError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(BookingError):
    pass


class HashingError(BookingError):
    pass


class MismatchError(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED


# =========================
# AUTHENTICATION
# =========================

INVALID_CREDENTIALS = "Invalid email or password."


class AuthError(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = INVALID_CREDENTIALS):
        super().__init__(message)


class UserNotFoundError(AuthError):
    pass


class WrongPasswordError(AuthError):
    pass


class TokenIssuanceError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Could not issue access token."):
        super().__init__(message)
