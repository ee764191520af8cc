import logging
import os
from datetime import datetime, time, timedelta, timezone

from sqlalchemy.engine import Engine
from sqlmodel import Session

from booking_api.core.config import Settings
from booking_api.core.logging_config import setup_logging
from booking_api.database import build_engine, create_db_and_tables
from booking_api.domain.records import ServiceManager, UserManager
from booking_api.models.service import Service, ServiceCreate
from booking_api.models.user import AccountType, User, UserCreate
from booking_api.repositories.store import SQLModelStore


logger = logging.getLogger(__name__)

BUSINESS_EMAIL = os.getenv("SEED_BUSINESS_EMAIL", "studio@example.com")
BUSINESS_PASSWORD = os.getenv("SEED_BUSINESS_PASSWORD", "change-me")


def seed(engine: Engine, email: str = BUSINESS_EMAIL, password: str = BUSINESS_PASSWORD) -> User:
    """Create a business account and a few sample services if missing."""
    create_db_and_tables(engine)

    with Session(engine) as session:
        users = UserManager(SQLModelStore(session, User))
        services = ServiceManager(SQLModelStore(session, Service))

        # 1) business account
        business = users.store.find_one(email=email)
        if business is None:
            business = users.create(
                UserCreate(
                    email=email,
                    password=password,
                    account_type=AccountType.business,
                    first_name="Demo",
                    last_name="Studio",
                )
            )

        # 2) sample services, tomorrow
        if not services.get_all(business_id=business.id):
            tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).date()
            samples = [
                ServiceCreate(
                    name="Yoga class",
                    description="30 minute beginner yoga class",
                    start_date_time=datetime.combine(tomorrow, time(9, 0, tzinfo=timezone.utc)),
                    length=30,
                    capacity=20,
                    price=2000,
                ),
                ServiceCreate(
                    name="Spin class",
                    description="60 minute intermediate spin class",
                    start_date_time=datetime.combine(tomorrow, time(18, 0, tzinfo=timezone.utc)),
                    length=60,
                    capacity=10,
                    price=5000,
                    cancel_fee=1000,
                ),
            ]
            for sample in samples:
                services.create(sample, business_id=business.id)

        # reload after the commits above so the instance outlives the session
        session.refresh(business)
        logger.info("Seed done: business %s (ID %d)", business.email, business.id)
        return business


def main():
    settings = Settings()
    setup_logging(settings.log_level)
    seed(build_engine(settings))


if __name__ == "__main__":
    main()
