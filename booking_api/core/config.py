"""
Application settings.

Values are read from environment variables (a ``.env`` file at the
project root is loaded first).  A ``Settings`` instance is built once by
``create_app`` and handed to everything that needs it.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent.parent / ".env")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Booking API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./booking.db"))
    # seconds a store call may wait on a lock or a pooled connection
    db_timeout: float = field(default_factory=lambda: float(os.getenv("DB_TIMEOUT", "10")))

    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", ""))
    algorithm: str = field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
    )
