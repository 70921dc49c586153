"""On-device fallback database.

Same tables and queries as the API, in a SQLite file, seeded with the demo
agencies and vehicles the first time it is opened. Every method returns the
same camelCase JSON shapes the API would.
"""
from contextlib import contextmanager
from typing import Optional
import logging
import os

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from services.marketplace_service import crud
from services.marketplace_service.database import Base, make_engine
from services.marketplace_service.exceptions import AuthError, MarketplaceError
from services.marketplace_service.schemas import (
    AgencyResponse, BookingCreate, BookingResponse, LoginRequest, RegisterRequest, ReviewCreate,
    UserResponse, VehicleCreate, VehicleResponse, VehicleUpdate
)
from services.marketplace_service.seed import seed_if_empty

from .client import ApiError

logger = logging.getLogger(__name__)

LOCAL_DB_PATH = os.getenv("LOCAL_DB_PATH", "carrental.db")


def _dump(schema: Optional[type[BaseModel]], obj) -> dict:
    if not isinstance(obj, BaseModel):
        obj = schema.model_validate(obj)
    return obj.model_dump(by_alias=True, mode="json")


class LocalStore:
    def __init__(self, path: str = LOCAL_DB_PATH):
        url = "sqlite://" if path == ":memory:" else f"sqlite:///{path}"
        self.engine = make_engine(url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        with self.SessionLocal() as db:
            seed_if_empty(db)
        logger.info(f"Local store ready at {path}")

    @contextmanager
    def _session(self):
        db = self.SessionLocal()
        try:
            yield db
        except AuthError as e:
            raise ApiError(e.message, status_code=e.status_code, payload={"code": e.code, "message": e.message})
        except MarketplaceError as e:
            raise ApiError(e.message, status_code=e.status_code, payload={"message": e.message})
        except ValidationError as e:
            raise ApiError(str(e), status_code=422)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Local store query failed: {e}")
            raise ApiError(str(e), status_code=500, payload={"error": str(e)})
        finally:
            db.close()

    def register(self, payload: dict) -> dict:
        with self._session() as db:
            return _dump(UserResponse, crud.register_user(db, RegisterRequest.model_validate(payload)))

    def login(self, payload: dict) -> dict:
        with self._session() as db:
            return _dump(UserResponse, crud.login_user(db, LoginRequest.model_validate(payload)))

    def get_user(self, user_id: str) -> dict:
        with self._session() as db:
            return _dump(UserResponse, crud.get_user(db, user_id))

    def get_agencies(self) -> list[dict]:
        with self._session() as db:
            return [_dump(AgencyResponse, a) for a in crud.list_agencies(db)]

    def get_all_vehicles(self) -> list[dict]:
        with self._session() as db:
            return [_dump(VehicleResponse, v) for v in crud.list_vehicles(db)]

    def get_vehicles_by_agency(self, agency_id: str) -> list[dict]:
        with self._session() as db:
            return [_dump(VehicleResponse, v) for v in crud.list_agency_vehicles(db, agency_id)]

    def get_reviews_by_agency(self, agency_id: str) -> list[dict]:
        with self._session() as db:
            return [_dump(None, r) for r in crud.list_agency_reviews(db, agency_id)]

    def create_review(self, payload: dict) -> dict:
        with self._session() as db:
            review = crud.create_review(db, ReviewCreate.model_validate(payload))
            return {"id": review.id, "status": "success"}

    def create_vehicle(self, payload: dict) -> dict:
        with self._session() as db:
            vehicle = crud.create_vehicle(db, VehicleCreate.model_validate(payload))
            return {"id": vehicle.id, "status": "success"}

    def update_vehicle(self, vehicle_id: str, payload: dict) -> dict:
        with self._session() as db:
            if not crud.update_vehicle(db, vehicle_id, VehicleUpdate.model_validate(payload)):
                return {"message": "No changes"}
            return {"success": True}

    def delete_vehicle(self, vehicle_id: str) -> dict:
        with self._session() as db:
            crud.delete_vehicle(db, vehicle_id)
            return {"success": True}

    def get_bookings_by_user(self, user_id: str) -> list[dict]:
        with self._session() as db:
            return [_dump(None, b) for b in crud.list_user_bookings(db, user_id)]

    def get_bookings_by_agency(self, agency_id: str) -> list[dict]:
        with self._session() as db:
            return [_dump(None, b) for b in crud.list_agency_bookings(db, agency_id)]

    def create_booking(self, payload: dict) -> dict:
        with self._session() as db:
            booking = crud.create_booking(db, BookingCreate.model_validate(payload))
            return {"id": booking.id, "status": booking.status}

    def update_booking_status(self, booking_id: str, status: str) -> dict:
        with self._session() as db:
            return _dump(BookingResponse, crud.update_booking_status(db, booking_id, status))

    def close(self):
        self.engine.dispose()
