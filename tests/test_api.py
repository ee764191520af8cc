import pytest
from fastapi.testclient import TestClient
from jose import jwt

from booking_api.core.errors import INVALID_CREDENTIALS
from booking_api.main import create_app


SERVICE = {
    "name": "Yoga class",
    "description": "30 minute beginner yoga class",
    "start_date_time": "2030-05-31T14:30:00",
    "length": 30,
    "capacity": 20,
    "price": 2000,
    "cancel_fee": 0,
}


def create_service(client, headers, **overrides):
    response = client.post("/services", json={**SERVICE, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "running" in response.json()["message"]


# =========================
# USERS
# =========================

def test_create_user_never_returns_password(register):
    user = register("a@b.com")

    assert user["email"] == "a@b.com"
    assert user["account_type"] == "individual"
    assert user["deleted_at"] is None
    assert "password" not in user
    assert "password_hash" not in user


def test_create_user_bad_bodies(client, register):
    register("a@b.com")

    missing = client.post("/users", json={"email": "c@d.com"})
    assert missing.status_code == 400
    assert "error" in missing.json()

    not_json = client.post("/users", content=b"{not json", headers={"Content-Type": "application/json"})
    assert not_json.status_code == 400

    duplicate = client.post(
        "/users",
        json={"email": "a@b.com", "password": "x", "first_name": "A", "last_name": "B"},
    )
    assert duplicate.status_code == 400
    assert "already registered" in duplicate.json()["error"]

    bad_type = client.post(
        "/users",
        json={"email": "e@f.com", "password": "x", "first_name": "A", "last_name": "B", "account_type": "admin"},
    )
    assert bad_type.status_code == 400


def test_get_user_by_id_or_email(client, register):
    user = register("a@b.com")

    assert client.get(f"/users/{user['id']}").json()["email"] == "a@b.com"
    assert client.get("/users/a@b.com").json()["id"] == user["id"]

    missing = client.get("/users/999")
    assert missing.status_code == 404
    assert "does not exist" in missing.json()["error"]
    assert client.get("/users/x@y.com").status_code == 404


def test_update_user_is_a_patch(client, register):
    user = register("a@b.com")

    response = client.put("/users/a@b.com", json={"first_name": "Grace"})

    assert response.status_code == 200
    body = response.json()
    assert body["first_name"] == "Grace"
    assert body["last_name"] == user["last_name"]
    assert body["email"] == user["email"]

    assert client.put("/users/a@b.com", json={"nickname": "ada"}).status_code == 400
    assert client.put("/users/999", json={"first_name": "Grace"}).status_code == 404


def test_password_change_takes_effect(client, register):
    register("a@b.com")

    client.put("/users/a@b.com", json={"password": "new-secret"})

    assert client.post("/login", json={"email": "a@b.com", "password": "secret"}).status_code == 401
    assert client.post("/login", json={"email": "a@b.com", "password": "new-secret"}).status_code == 200


def test_delete_user_is_soft(client, register):
    user = register("a@b.com")
    register("c@d.com")

    response = client.delete(f"/users/{user['id']}")

    assert response.status_code == 200
    assert response.json()["deleted_at"] is not None
    assert [u["email"] for u in client.get("/users").json()] == ["c@d.com"]

    tombstone = client.get(f"/users/{user['id']}")
    assert tombstone.status_code == 200
    assert tombstone.json()["deleted_at"] is not None

    assert client.delete(f"/users/{user['id']}").status_code == 404
    assert client.put(f"/users/{user['id']}", json={"first_name": "Grace"}).status_code == 404


# =========================
# LOGIN
# =========================

def test_login_scenario(client, register, auth_headers):
    register("a@b.com")

    ok = client.post("/login", json={"email": "a@b.com", "password": "secret"})
    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"
    assert ok.json()["access_token"]

    wrong = client.post("/login", json={"email": "a@b.com", "password": "wrong"})
    unknown = client.post("/login", json={"email": "x@y.com", "password": "secret"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": INVALID_CREDENTIALS}

    me = client.get("/users/me", headers=auth_headers("a@b.com"))
    assert me.status_code == 200
    assert me.json()["email"] == "a@b.com"


def test_login_malformed(client):
    assert client.post("/login", json={"email": "a@b.com"}).status_code == 400
    assert client.post("/login", content=b"nope", headers={"Content-Type": "application/json"}).status_code == 400


def test_me_requires_token(client):
    assert client.get("/users/me").status_code == 401
    assert client.get("/users/me", headers={"Authorization": "Bearer nope"}).status_code == 401


# =========================
# SERVICES
# =========================

def test_only_business_accounts_create_services(client, register, auth_headers):
    business = register("studio@b.com", account_type="business")
    register("a@b.com")

    assert client.post("/services", json=SERVICE).status_code == 401
    assert client.post("/services", json=SERVICE, headers=auth_headers("a@b.com")).status_code == 403

    service = create_service(client, auth_headers("studio@b.com"), business_id=999)
    assert service["business_id"] == business["id"]
    assert [s["id"] for s in client.get("/services").json()] == [service["id"]]
    assert client.get(f"/services?business_id={business['id']}").json()[0]["name"] == "Yoga class"


def test_service_owner_updates_and_deletes(client, register, auth_headers):
    register("studio@b.com", account_type="business")
    register("rival@b.com", account_type="business")
    owner = auth_headers("studio@b.com")
    service = create_service(client, owner)

    rival = auth_headers("rival@b.com")
    assert client.put(f"/services/{service['id']}", json={"price": 1}, headers=rival).status_code == 403

    updated = client.put(f"/services/{service['id']}", json={"price": 2500}, headers=owner).json()
    assert updated["price"] == 2500
    assert updated["name"] == "Yoga class"

    assert client.put(f"/services/{service['id']}", json={"price": -1}, headers=owner).status_code == 400

    deleted = client.delete(f"/services/{service['id']}", headers=owner)
    assert deleted.json()["deleted_at"] is not None
    assert client.get("/services").json() == []


# =========================
# APPOINTMENTS & INVOICES
# =========================

def test_booking_flow(client, register, auth_headers):
    register("studio@b.com", account_type="business")
    customer = register("a@b.com")
    service = create_service(client, auth_headers("studio@b.com"))

    created = client.post("/appointments", json={"service_id": service["id"], "user_id": customer["id"]})
    assert created.status_code == 201
    appt = created.json()
    assert appt["active"] is True
    assert appt["cancel_date_time"] is None

    again = client.post("/appointments", json={"service_id": service["id"], "user_id": customer["id"]})
    assert again.status_code == 400

    booked = client.get(f"/users/{customer['id']}/appointments").json()
    assert booked[0]["appointment"]["id"] == appt["id"]
    assert booked[0]["service"]["name"] == "Yoga class"
    assert client.get(f"/users/a@b.com/services/{service['id']}").json()["booked"] is True
    assert [a["id"] for a in client.get(f"/appointments?user_id={customer['id']}").json()] == [appt["id"]]

    cancelled = client.put(f"/appointments/{appt['id']}", json={"active": False}).json()
    assert cancelled["active"] is False
    assert cancelled["cancel_date_time"] is not None
    assert cancelled["service_id"] == service["id"]
    assert cancelled["user_id"] == customer["id"]

    invoice = client.post(
        "/invoices",
        json={"appointment_id": appt["id"], "original_balance": 1000, "remaining_balance": 1000},
    ).json()
    assert invoice["status"] == "Unpaid"

    paid = client.put(f"/invoices/{invoice['id']}", json={"remaining_balance": 0}).json()
    assert paid["status"] == "Paid"
    assert paid["original_balance"] == 1000

    # status is derived, not writable
    assert client.put(f"/invoices/{invoice['id']}", json={"status": "Unpaid"}).status_code == 400
    assert client.get(f"/invoices?appointment_id={appt['id']}").json()[0]["status"] == "Paid"


def test_appointment_errors(client, register):
    customer = register("a@b.com")

    assert client.post("/appointments", json={"service_id": 999, "user_id": customer["id"]}).status_code == 400
    assert client.get("/appointments/abc").status_code == 400
    assert client.get("/appointments/999").status_code == 404
    assert client.put("/appointments/999", json={"active": False}).status_code == 404
    assert client.delete("/appointments/999").status_code == 404
    assert client.post("/invoices", json={"appointment_id": 999, "original_balance": 10}).status_code == 400


# =========================
# NO SIGNING KEY
# =========================

@pytest.fixture()
def unsigned_client(settings, engine):
    settings.secret_key = ""
    with TestClient(create_app(settings=settings, engine=engine)) as client:
        yield client


def test_tokens_refused_without_signing_key(unsigned_client):
    unsigned_client.post(
        "/users",
        json={
            "email": "studio@b.com",
            "password": "secret",
            "account_type": "business",
            "first_name": "Ada",
            "last_name": "Lovelace",
        },
    )
    assert unsigned_client.post("/login", json={"email": "studio@b.com", "password": "secret"}).status_code == 500

    forged = jwt.encode({"sub": "studio@b.com", "account_type": "business"}, "", algorithm="HS256")
    headers = {"Authorization": f"Bearer {forged}"}

    assert unsigned_client.get("/users/me", headers=headers).status_code == 401
    assert unsigned_client.post("/services", json=SERVICE, headers=headers).status_code == 401
    assert unsigned_client.get("/services").json() == []
