from datetime import datetime, timezone
import uuid

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
)
from sqlalchemy.dialects.postgresql import JSONB

from .database import Base

JSONList = JSON().with_variant(JSONB(), "postgresql")


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(255), primary_key=True, default=new_id)
    name = Column(String(255))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    phone = Column(String(50))
    profile_photo_url = Column(Text)
    license_status = Column(String(50), nullable=False, default="pending")
    average_rating = Column(Float, nullable=False, default=0)
    total_rentals = Column(Integer, nullable=False, default=0)
    user_type = Column(String(50), nullable=False, default="client")
    agency_name = Column(String(255))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "user_type IN ('client', 'manager')",
            name="user_type_check"
        ),
    )


class Agency(Base):
    __tablename__ = "agencies"

    id = Column(String(255), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    location_lat = Column(Float)
    location_lng = Column(Float)
    address = Column(String(255))
    logo_url = Column(Text)
    rating = Column(Float, nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)
    min_price = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(255), primary_key=True, default=new_id)
    agency_id = Column(String(255), ForeignKey("agencies.id"), nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer)
    category = Column(String(50))
    price_per_day = Column(Float, nullable=False)
    image_url = Column(Text)
    transmission = Column(String(50))
    fuel_type = Column(String(50))
    seats = Column(Integer)
    rating = Column(Float, nullable=False, default=0)
    total_trips = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)
    delivery_fee = Column(Float, nullable=False, default=0)
    features = Column(JSONList, nullable=False, default=list)
    images = Column(JSONList, nullable=False, default=list)
    location_lat = Column(Float)
    location_lng = Column(Float)
    address = Column(String(255))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(255), primary_key=True, default=new_id)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(String(255), ForeignKey("vehicles.id"), nullable=False)
    agency_id = Column(String(255), ForeignKey("agencies.id"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    delivery_type = Column(String(50), nullable=False, default="pickup")
    delivery_address = Column(Text)
    total_price = Column(Float, nullable=False)
    status = Column(String(50), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'in_progress', 'completed', 'cancelled', 'rejected')",
            name="booking_status_check"
        ),
    )


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(255), primary_key=True, default=new_id)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False)
    agency_id = Column(String(255), ForeignKey("agencies.id"), nullable=False, index=True)
    vehicle_id = Column(String(255), ForeignKey("vehicles.id"))
    rating = Column(Float, nullable=False)
    comment = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
