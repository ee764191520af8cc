from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from booking_api.core.config import Settings
from booking_api.core.errors import HashingError, MismatchError, TokenIssuanceError


# =========================
# PASSWORD HASHING
# =========================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError) as exc:
        raise HashingError(f"Could not hash password. [{exc}]") from exc


def verify_password(plain_password: str, hashed_password: str) -> None:
    """Raise ``MismatchError`` unless ``plain_password`` matches the hash.

    bcrypt compares digests in constant time; a malformed or unknown hash
    counts as a mismatch.
    """
    try:
        matches = pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as exc:
        raise MismatchError("Password does not match.") from exc

    if not matches:
        raise MismatchError("Password does not match.")


# =========================
# JWT TOKEN
# =========================

def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    if not settings.secret_key:
        raise TokenIssuanceError("No signing key configured.")

    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})

    try:
        token = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    except JWTError as exc:
        raise TokenIssuanceError() from exc

    return token, expire


def decode_access_token(token: str, settings: Settings) -> Optional[dict]:
    """Return the token claims, or ``None`` for a bad signature or an expired token.

    Without a configured signing key no token is accepted.
    """
    if not settings.secret_key:
        return None

    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
