from sqlalchemy.exc import OperationalError

from services.marketplace_service import crud
from services.marketplace_service.models import Review


def test_list_agencies(client, seeded):
    response = client.get("/agencies")

    assert response.status_code == 200
    agencies = {a["id"]: a for a in response.json()}
    assert set(agencies) == {"1", "2"}
    premium = agencies["1"]
    assert premium["name"] == "Premium Cars"
    assert premium["locationLat"] == 34.020882
    assert premium["totalReviews"] == 120
    assert premium["minPrice"] == 500
    assert premium["logoUrl"].startswith("https://")


def test_list_vehicles(client, seeded):
    vehicles = client.get("/vehicles").json()

    assert len(vehicles) == 4
    mercedes = next(v for v in vehicles if v["id"] == "v1")
    assert mercedes["pricePerDay"] == 1200
    assert mercedes["isAvailable"] is True
    assert mercedes["features"] == ["GPS", "Leather Seats"]
    assert mercedes["images"] == []
    assert mercedes["fuelType"] == "Diesel"
    assert mercedes["address"] == "Rabat Agdal"


def test_list_agency_vehicles(client, seeded):
    vehicles = client.get("/agencies/2/vehicles").json()

    assert sorted(v["id"] for v in vehicles) == ["v3", "v4"]
    assert all(v["agencyId"] == "2" for v in vehicles)


def test_list_vehicles_of_unknown_agency_is_empty(client, seeded):
    response = client.get("/agencies/nope/vehicles")

    assert response.status_code == 200
    assert response.json() == []


def test_reviews_embed_reviewer_name(client, seeded, register_user):
    user = register_user(name="Youssef")
    created = client.post("/reviews", json={
        "userId": user["id"], "agencyId": "1", "vehicleId": "v1", "rating": 5, "comment": "Spotless"
    })
    assert created.status_code == 200
    assert created.json()["status"] == "success"

    reviews = client.get("/agencies/1/reviews").json()

    assert len(reviews) == 1
    assert reviews[0]["id"] == created.json()["id"]
    assert reviews[0]["comment"] == "Spotless"
    assert reviews[0]["user"] == {"name": "Youssef"}


def test_reviews_fail_open_when_reviewer_is_gone(client, seeded, db):
    db.add(Review(user_id="deleted-user", agency_id="2", rating=3, comment="ok"))
    db.commit()

    reviews = client.get("/agencies/2/reviews").json()

    assert len(reviews) == 1
    assert reviews[0]["user"] == {"name": None}


def test_review_refreshes_agency_rating(client, seeded, register_user):
    user = register_user()
    client.post("/reviews", json={"userId": user["id"], "agencyId": "2", "rating": 4})
    client.post("/reviews", json={"userId": user["id"], "agencyId": "2", "rating": 5})

    agency = next(a for a in client.get("/agencies").json() if a["id"] == "2")

    assert agency["rating"] == 4.5
    assert agency["totalReviews"] == 2


def test_review_rating_out_of_range_is_rejected(client, seeded, register_user):
    user = register_user()

    response = client.post("/reviews", json={"userId": user["id"], "agencyId": "1", "rating": 6})

    assert response.status_code == 422


def test_review_for_unknown_agency_is_404(client, register_user):
    user = register_user()

    response = client.post("/reviews", json={"userId": user["id"], "agencyId": "nope", "rating": 4})

    assert response.status_code == 404
    assert response.json() == {"message": "Agency not found"}


def test_health_check(client):
    assert client.get("/manage/health").json() == {"status": "ok"}


def test_database_failure_is_500_with_error(client, monkeypatch):
    def broken(db):
        raise OperationalError("SELECT * FROM agencies", {}, Exception("database is locked"))

    monkeypatch.setattr(crud, "list_agencies", broken)

    response = client.get("/agencies")

    assert response.status_code == 500
    assert "database is locked" in response.json()["error"]
