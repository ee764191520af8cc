from fastapi.testclient import TestClient
from sqlmodel import Session

from booking_api.main import create_app
from booking_api.models.service import Service
from booking_api.models.user import AccountType, User
from booking_api.repositories.store import SQLModelStore
from booking_api.scripts.seed import seed


def test_seed_is_idempotent(engine):
    first = seed(engine, email="studio@example.com", password="pw")
    second = seed(engine, email="studio@example.com", password="pw")

    assert first.id == second.id
    assert first.account_type == AccountType.business

    with Session(engine) as session:
        assert len(SQLModelStore(session, User).find_all()) == 1
        services = SQLModelStore(session, Service).find_all(business_id=first.id)
        assert [service.name for service in services] == ["Yoga class", "Spin class"]


def test_seeded_business_can_log_in(engine, settings):
    seed(engine, email="studio@example.com", password="pw")

    with TestClient(create_app(settings=settings, engine=engine)) as client:
        response = client.post("/login", json={"email": "studio@example.com", "password": "pw"})

    assert response.status_code == 200
