from fastapi import FastAPI, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
import logging
import os
import uvicorn

from . import crud
from .database import engine, get_db, Base, SessionLocal
from .exceptions import AuthError, MarketplaceError
from .schemas import (
    AgencyBookingResponse, AgencyResponse, AuthErrorResponse, BookingCreate, BookingResponse,
    BookingStatusUpdate, CreatedResponse, ErrorResponse, LoginRequest, MessageResponse,
    RegisterRequest, ReviewCreate, ReviewResponse, SuccessResponse, UserBookingResponse,
    UserResponse, VehicleCreate, VehicleResponse, VehicleUpdate
)
from .seed import seed_if_empty

logger = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", "3000"))
SEED_DATA = os.getenv("SEED_DATA", "true").lower() in ("1", "true", "yes")

app = FastAPI(title="Car Rental Marketplace API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_event():
    Base.metadata.create_all(bind=engine)
    if SEED_DATA:
        db = SessionLocal()
        try:
            seed_if_empty(db)
        finally:
            db.close()


@app.exception_handler(MarketplaceError)
def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if isinstance(exc, AuthError):
        body = AuthErrorResponse(code=exc.code, message=exc.message)
    else:
        body = ErrorResponse(message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(SQLAlchemyError)
def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/manage/health")
def health_check():
    return {"status": "ok"}


@app.post("/auth/register", response_model=UserResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    return crud.register_user(db, payload)


@app.post("/auth/login", response_model=UserResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return crud.login_user(db, payload)


@app.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return crud.get_user(db, user_id)


@app.get("/agencies", response_model=List[AgencyResponse])
def list_agencies(db: Session = Depends(get_db)):
    return crud.list_agencies(db)


@app.get("/agencies/{agency_id}/vehicles", response_model=List[VehicleResponse])
def list_agency_vehicles(agency_id: str, db: Session = Depends(get_db)):
    return crud.list_agency_vehicles(db, agency_id)


@app.get("/agencies/{agency_id}/reviews", response_model=List[ReviewResponse])
def list_agency_reviews(agency_id: str, db: Session = Depends(get_db)):
    return crud.list_agency_reviews(db, agency_id)


@app.post("/reviews", response_model=CreatedResponse)
def create_review(payload: ReviewCreate, db: Session = Depends(get_db)):
    review = crud.create_review(db, payload)
    return CreatedResponse(id=review.id, status="success")


@app.get("/vehicles", response_model=List[VehicleResponse])
def list_vehicles(db: Session = Depends(get_db)):
    return crud.list_vehicles(db)


@app.post("/vehicles", response_model=CreatedResponse)
def create_vehicle(payload: VehicleCreate, db: Session = Depends(get_db)):
    vehicle = crud.create_vehicle(db, payload)
    return CreatedResponse(id=vehicle.id, status="success")


@app.put("/vehicles/{vehicle_id}")
def update_vehicle(vehicle_id: str, payload: VehicleUpdate, db: Session = Depends(get_db)):
    """An empty update answers "No changes" before the id is looked up; an unknown id is a 404."""
    if not crud.update_vehicle(db, vehicle_id, payload):
        return MessageResponse(message="No changes")
    return SuccessResponse()


@app.delete("/vehicles/{vehicle_id}", response_model=SuccessResponse)
def delete_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    crud.delete_vehicle(db, vehicle_id)
    return SuccessResponse()


@app.get("/bookings/my", response_model=List[UserBookingResponse])
def list_my_bookings(user_id: str = Query(..., alias="userId"), db: Session = Depends(get_db)):
    return crud.list_user_bookings(db, user_id)


@app.get("/bookings/agency/{agency_id}", response_model=List[AgencyBookingResponse])
def list_agency_bookings(agency_id: str, db: Session = Depends(get_db)):
    return crud.list_agency_bookings(db, agency_id)


@app.post("/bookings", response_model=CreatedResponse)
def create_booking(payload: BookingCreate, db: Session = Depends(get_db)):
    booking = crud.create_booking(db, payload)
    return CreatedResponse(id=booking.id, status=booking.status)


@app.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(booking_id: str, payload: BookingStatusUpdate, db: Session = Depends(get_db)):
    return crud.update_booking_status(db, booking_id, payload.status)


def run():
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    run()
