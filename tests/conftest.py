import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient

from services.marketplace_service.database import Base, SessionLocal, engine
from services.marketplace_service.main import app
from services.marketplace_service.seed import seed_if_empty


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    seed_if_empty(db)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register_user(client):
    def _register(**overrides):
        payload = {
            "name": "Amina",
            "email": "amina@example.com",
            "password": "secret",
            "userType": "client",
        }
        payload.update(overrides)
        response = client.post("/auth/register", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _register
