from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from booking_api.core.config import Settings


def build_engine(settings: Settings, **kwargs) -> Engine:
    """Create the engine with the store timeout from ``settings`` applied."""
    if settings.database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": settings.db_timeout}
        return create_engine(
            settings.database_url, echo=settings.debug, connect_args=connect_args, **kwargs
        )

    return create_engine(
        settings.database_url, echo=settings.debug, pool_timeout=settings.db_timeout, **kwargs
    )


def create_db_and_tables(engine: Engine) -> None:
    # table classes register themselves on import
    from booking_api.models import appointment, invoice, service, user  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
