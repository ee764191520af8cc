import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from booking_api.core.config import Settings
from booking_api.database import build_engine, create_db_and_tables
from booking_api.main import create_app


PASSWORD = "secret"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        secret_key="tests-secret-key",
        debug=False,
        log_level="WARNING",
    )


@pytest.fixture()
def engine(settings: Settings):
    engine = build_engine(settings, poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(settings: Settings, engine):
    app = create_app(settings=settings, engine=engine)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def register(client: TestClient):
    def register(email: str, account_type: str = "individual", password: str = PASSWORD) -> dict:
        response = client.post(
            "/users",
            json={
                "email": email,
                "password": password,
                "account_type": account_type,
                "first_name": "Ada",
                "last_name": "Lovelace",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return register


@pytest.fixture()
def auth_headers(client: TestClient):
    def auth_headers(email: str, password: str = PASSWORD) -> dict:
        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return auth_headers
