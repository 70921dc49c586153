import pytest

from services.marketplace_service import crud
from services.marketplace_service.exceptions import AuthError
from services.marketplace_service.models import Agency, User
from services.marketplace_service.schemas import RegisterRequest


def test_register_client_returns_camel_case_user(register_user):
    user = register_user()

    assert user["email"] == "amina@example.com"
    assert user["userType"] == "client"
    assert user["licenseStatus"] == "pending"
    assert user["averageRating"] == 0
    assert user["totalRentals"] == 0
    assert user["agencyName"] is None
    assert "password" not in user
    assert "createdAt" in user


def test_register_duplicate_email_is_rejected(client, register_user, db):
    register_user()

    response = client.post("/auth/register", json={
        "name": "Other",
        "email": "amina@example.com",
        "password": "x",
        "userType": "client",
    })

    assert response.status_code == 400
    assert response.json() == {"code": "auth/email-already-in-use", "message": "Email already in use"}
    assert db.query(User).count() == 1


def test_register_manager_creates_agency_once(register_user, db):
    register_user(email="m1@example.com", userType="manager", agencyName="Atlas Rent")
    register_user(email="m2@example.com", userType="manager", agencyName="Atlas Rent")

    agencies = db.query(Agency).filter(Agency.name == "Atlas Rent").all()
    assert len(agencies) == 1
    agency = agencies[0]
    assert agency.description == "New Agency"
    assert agency.address == "Morocco"
    assert agency.location_lat == 34.020882
    assert agency.location_lng == -6.841650
    assert agency.total_reviews == 0


def test_register_manager_reuses_seeded_agency(register_user, seeded, db):
    register_user(email="m@example.com", userType="manager", agencyName="Premium Cars")

    assert db.query(Agency).count() == 2


def test_register_client_with_agency_name_creates_no_agency(register_user, db):
    register_user(agencyName="Not A Manager")

    assert db.query(Agency).count() == 0


def test_register_rejects_unknown_user_type(client):
    response = client.post("/auth/register", json={
        "name": "X", "email": "x@example.com", "password": "x", "userType": "admin"
    })

    assert response.status_code == 422


def test_login_returns_matching_user(client, register_user):
    created = register_user()

    response = client.post("/auth/login", json={"email": "amina@example.com", "password": "secret"})

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_login_rejects_wrong_password(client, register_user):
    register_user()

    response = client.post("/auth/login", json={"email": "amina@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"code": "auth/invalid-credential", "message": "Invalid credentials"}


def test_login_rejects_unknown_email(client):
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret"})

    assert response.status_code == 401
    assert response.json()["code"] == "auth/invalid-credential"


def test_get_user(client, register_user):
    created = register_user()

    response = client.get(f"/users/{created['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Amina"


def test_get_unknown_user_is_404(client):
    response = client.get("/users/missing")

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_register_email_taken_before_commit_is_duplicate(db, monkeypatch):
    db.add(User(name="Early", email="amina@example.com", password="x"))
    db.commit()

    real_query = db.query

    def query(*entities):
        # The existence check misses, so the unique index has to catch it.
        monkeypatch.setattr(db, "query", real_query)
        return real_query(*entities).filter(User.id == "missing")

    monkeypatch.setattr(db, "query", query)

    with pytest.raises(AuthError) as excinfo:
        crud.register_user(db, RegisterRequest(name="Amina", email="amina@example.com", password="secret"))

    assert excinfo.value.status_code == 400
    assert excinfo.value.code == "auth/email-already-in-use"
    assert db.query(User).count() == 1
