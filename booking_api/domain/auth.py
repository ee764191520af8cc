"""Login workflow: decode credentials, find the user, check the password,
issue a signed bearer token.

Sessions are stateless JWTs only; nothing is kept server side.  A missing
user and a wrong password raise different errors (and are logged
differently) but both answer the client with the same 401 message.
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from booking_api.core.config import Settings
from booking_api.core.errors import AuthError, DecodeError, MismatchError, UserNotFoundError, WrongPasswordError
from booking_api.core.security import create_access_token, decode_access_token, pwd_context, verify_password
from booking_api.models.user import AccountType, User
from booking_api.repositories.store import Store


logger = logging.getLogger(__name__)


class Credentials(BaseModel):
    email: str
    password: str


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class Authenticator:
    def __init__(self, users: Store[User], settings: Settings):
        self.users = users
        self.settings = settings

    def decode(self, payload: Any) -> Credentials:
        try:
            return Credentials.model_validate(payload)
        except PydanticValidationError as exc:
            raise DecodeError(f"Malformed credentials: expected 'email' and 'password'. [{exc.error_count()} error(s)]") from exc

    def authenticate(self, payload: Any) -> AccessToken:
        credentials = self.decode(payload)

        user = self.users.find_one(email=credentials.email)
        if user is None:
            # spend one bcrypt round like a real check
            pwd_context.dummy_verify()
            logger.warning("Login failed: no user with email %s", credentials.email)
            raise UserNotFoundError()

        try:
            verify_password(credentials.password, user.password_hash)
        except MismatchError as exc:
            logger.warning("Login failed: wrong password for User ID (%d)", user.id)
            raise WrongPasswordError() from exc

        token, expires_at = create_access_token(
            data={"sub": user.email, "account_type": AccountType(user.account_type).value},
            settings=self.settings,
        )

        logger.info("User ID (%d) logged in.", user.id)
        return AccessToken(access_token=token, expires_at=expires_at)

    def current_user(self, token: str) -> User:
        """Resolve a bearer token to its live user."""
        payload = decode_access_token(token, self.settings)
        email = payload.get("sub") if payload else None

        user = self.users.find_one(email=email) if email else None
        if user is None:
            raise AuthError("Could not validate credentials.")

        return user
