import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .exceptions import ConflictError, NotFoundError, email_in_use, invalid_credentials
from .models import Agency, Booking, Review, User, Vehicle
from .pricing import quote_booking
from .schemas import (
    AgencyBookingResponse, AgencySummary, BookingCreate, BookingResponse, CustomerSummary,
    LoginRequest, RegisterRequest, ReviewCreate, ReviewerInfo, ReviewResponse,
    UserBookingResponse, VehicleCreate, VehicleSummary, VehicleUpdate
)

logger = logging.getLogger(__name__)

# Placeholder location for agencies created during manager sign-up.
DEFAULT_AGENCY_LAT = 34.020882
DEFAULT_AGENCY_LNG = -6.841650
DEFAULT_AGENCY_ADDRESS = "Morocco"

VEHICLE_DEFAULTS = {
    "year": 2024,
    "category": "compact",
    "transmission": "automatic",
    "fuel_type": "petrol",
    "seats": 5,
}

STATUS_TRANSITIONS = {
    "pending": {"confirmed", "rejected", "cancelled"},
    "confirmed": {"in_progress", "cancelled"},
    "in_progress": {"completed"},
}


def register_user(db: Session, data: RegisterRequest) -> User:
    if db.query(User).filter(User.email == data.email).first():
        raise email_in_use()

    if data.user_type == "manager" and data.agency_name:
        agency = db.query(Agency).filter(Agency.name == data.agency_name).first()
        if not agency:
            agency = Agency(
                name=data.agency_name,
                description="New Agency",
                address=DEFAULT_AGENCY_ADDRESS,
                location_lat=DEFAULT_AGENCY_LAT,
                location_lng=DEFAULT_AGENCY_LNG,
                rating=0,
                total_reviews=0,
                min_price=0
            )
            db.add(agency)
            logger.info(f"Created new agency: {data.agency_name}")

    user = User(
        name=data.name,
        email=data.email,
        password=data.password,
        phone=data.phone,
        user_type=data.user_type,
        agency_name=data.agency_name,
        license_status="pending",
        average_rating=0,
        total_rentals=0
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise email_in_use()
    db.refresh(user)
    return user


def login_user(db: Session, data: LoginRequest) -> User:
    user = db.query(User).filter(
        User.email == data.email,
        User.password == data.password
    ).first()
    if not user:
        raise invalid_credentials()
    return user


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def list_agencies(db: Session) -> list[Agency]:
    return db.query(Agency).all()


def list_vehicles(db: Session) -> list[Vehicle]:
    return db.query(Vehicle).all()


def list_agency_vehicles(db: Session, agency_id: str) -> list[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.agency_id == agency_id).all()


def create_vehicle(db: Session, data: VehicleCreate) -> Vehicle:
    agency = db.get(Agency, data.agency_id)
    if not agency:
        raise NotFoundError("Agency not found")

    vehicle = Vehicle(
        agency_id=agency.id,
        make=data.make,
        model=data.model,
        year=data.year or VEHICLE_DEFAULTS["year"],
        category=data.category or VEHICLE_DEFAULTS["category"],
        price_per_day=data.price_per_day,
        image_url=data.image_url,
        transmission=data.transmission or VEHICLE_DEFAULTS["transmission"],
        fuel_type=data.fuel_type or VEHICLE_DEFAULTS["fuel_type"],
        seats=data.seats or VEHICLE_DEFAULTS["seats"],
        rating=0,
        total_trips=0,
        is_available=True,
        delivery_fee=data.delivery_fee,
        features=list(data.features),
        images=list(data.images),
        location_lat=agency.location_lat,
        location_lng=agency.location_lng,
        address=agency.address
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    logger.info(f"Created vehicle {vehicle.id} for agency {agency.id}")
    return vehicle


def update_vehicle(db: Session, vehicle_id: str, data: VehicleUpdate) -> bool:
    """Apply only the fields present in ``data``; False when there is nothing to change."""
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return False

    vehicle = db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle not found")

    for field, value in changes.items():
        setattr(vehicle, field, value)
    db.commit()
    return True


def delete_vehicle(db: Session, vehicle_id: str) -> int:
    deleted = db.query(Vehicle).filter(Vehicle.id == vehicle_id).delete()
    db.commit()
    return deleted


def list_agency_reviews(db: Session, agency_id: str) -> list[ReviewResponse]:
    rows = (
        db.query(Review, User.name)
        .outerjoin(User, Review.user_id == User.id)
        .filter(Review.agency_id == agency_id)
        .order_by(Review.created_at.desc())
        .all()
    )
    return [
        ReviewResponse(
            id=review.id,
            user_id=review.user_id,
            agency_id=review.agency_id,
            vehicle_id=review.vehicle_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
            user=ReviewerInfo(name=user_name)
        )
        for review, user_name in rows
    ]


def create_review(db: Session, data: ReviewCreate) -> Review:
    agency = db.get(Agency, data.agency_id)
    if not agency:
        raise NotFoundError("Agency not found")

    review = Review(
        user_id=data.user_id,
        agency_id=data.agency_id,
        vehicle_id=data.vehicle_id,
        rating=data.rating,
        comment=data.comment
    )
    db.add(review)
    db.flush()

    average, count = db.query(
        func.avg(Review.rating), func.count(Review.id)
    ).filter(Review.agency_id == agency.id).one()
    agency.rating = round(float(average), 2)
    agency.total_reviews = count

    db.commit()
    db.refresh(review)
    return review


def _vehicle_summary(vehicle: Vehicle) -> VehicleSummary:
    return VehicleSummary(
        id=vehicle.id,
        make=vehicle.make,
        model=vehicle.model,
        image_url=vehicle.image_url
    )


def list_user_bookings(db: Session, user_id: str) -> list[UserBookingResponse]:
    rows = (
        db.query(Booking, Vehicle, Agency)
        .join(Vehicle, Booking.vehicle_id == Vehicle.id)
        .join(Agency, Booking.agency_id == Agency.id)
        .filter(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc())
        .all()
    )
    return [
        UserBookingResponse(
            **BookingResponse.model_validate(booking).model_dump(),
            vehicle=_vehicle_summary(vehicle),
            agency=AgencySummary(id=agency.id, name=agency.name, logo_url=agency.logo_url)
        )
        for booking, vehicle, agency in rows
    ]


def list_agency_bookings(db: Session, agency_id: str) -> list[AgencyBookingResponse]:
    rows = (
        db.query(Booking, Vehicle, User)
        .join(Vehicle, Booking.vehicle_id == Vehicle.id)
        .join(User, Booking.user_id == User.id)
        .filter(Booking.agency_id == agency_id)
        .order_by(Booking.created_at.desc())
        .all()
    )
    return [
        AgencyBookingResponse(
            **BookingResponse.model_validate(booking).model_dump(),
            vehicle=_vehicle_summary(vehicle),
            user=CustomerSummary(
                id=user.id,
                name=user.name,
                profile_photo_url=user.profile_photo_url,
                average_rating=user.average_rating
            )
        )
        for booking, vehicle, user in rows
    ]


def create_booking(db: Session, data: BookingCreate) -> Booking:
    vehicle = db.get(Vehicle, data.vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle not found")

    quote = quote_booking(
        vehicle.price_per_day,
        data.start_date,
        data.end_date,
        delivery_type=data.delivery_type,
        delivery_fee=vehicle.delivery_fee
    )
    if data.total_price is not None and abs(data.total_price - quote.total_price) > 0.005:
        logger.warning(
            f"Client total {data.total_price} for vehicle {vehicle.id} "
            f"does not match quote {quote.total_price}, storing the quote"
        )

    booking = Booking(
        user_id=data.user_id,
        vehicle_id=vehicle.id,
        agency_id=data.agency_id or vehicle.agency_id,
        start_date=data.start_date,
        end_date=data.end_date,
        delivery_type=data.delivery_type,
        delivery_address=data.delivery_address,
        total_price=quote.total_price,
        status="pending"
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(f"Created booking {booking.id} for user {booking.user_id}")
    return booking


def update_booking_status(db: Session, booking_id: str, status: str) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")

    if status not in STATUS_TRANSITIONS.get(booking.status, set()):
        raise ConflictError(f"Cannot move booking from {booking.status} to {status}")

    booking.status = status
    db.commit()
    db.refresh(booking)
    return booking
