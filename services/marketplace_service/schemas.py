from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

UserType = Literal["client", "manager"]
DeliveryType = Literal["pickup", "delivery"]
BookingStatus = Literal["pending", "confirmed", "in_progress", "completed", "cancelled", "rejected"]


class CamelModel(BaseModel):
    """Snake_case fields in Python, camelCase keys on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class RegisterRequest(CamelModel):
    name: str
    email: str
    password: str
    user_type: UserType = "client"
    agency_name: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(CamelModel):
    email: str
    password: str


class UserResponse(CamelModel):
    id: str
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    profile_photo_url: Optional[str] = None
    license_status: str
    average_rating: float
    total_rentals: int
    user_type: UserType
    agency_name: Optional[str] = None
    created_at: datetime


class AgencyResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    rating: float
    total_reviews: int
    min_price: float
    created_at: datetime


class VehicleResponse(CamelModel):
    id: str
    agency_id: str
    make: str
    model: str
    year: Optional[int] = None
    category: Optional[str] = None
    price_per_day: float
    image_url: Optional[str] = None
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    seats: Optional[int] = None
    rating: float
    total_trips: int
    is_available: bool
    delivery_fee: float
    features: list[str] = []
    images: list[str] = []
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    address: Optional[str] = None
    created_at: datetime


class VehicleCreate(CamelModel):
    agency_id: str
    make: str
    model: str
    year: Optional[int] = None
    category: Optional[str] = None
    price_per_day: float
    image_url: Optional[str] = None
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    seats: Optional[int] = None
    delivery_fee: float = 0
    features: list[str] = []
    images: list[str] = []


class VehicleUpdate(CamelModel):
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    category: Optional[str] = None
    price_per_day: Optional[float] = None
    image_url: Optional[str] = None
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    seats: Optional[int] = None
    is_available: Optional[bool] = None
    delivery_fee: Optional[float] = None
    features: Optional[list[str]] = None
    images: Optional[list[str]] = None


class ReviewCreate(CamelModel):
    user_id: str
    agency_id: str
    vehicle_id: Optional[str] = None
    rating: float = Field(ge=1, le=5)
    comment: Optional[str] = None


class ReviewerInfo(CamelModel):
    name: Optional[str] = None


class ReviewResponse(CamelModel):
    id: str
    user_id: str
    agency_id: str
    vehicle_id: Optional[str] = None
    rating: float
    comment: Optional[str] = None
    created_at: datetime
    user: ReviewerInfo


class BookingCreate(CamelModel):
    user_id: str
    vehicle_id: str
    agency_id: Optional[str] = None
    start_date: datetime
    end_date: datetime
    delivery_type: DeliveryType = "pickup"
    delivery_address: Optional[str] = None
    total_price: Optional[float] = None


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingResponse(CamelModel):
    id: str
    user_id: str
    vehicle_id: str
    agency_id: str
    start_date: datetime
    end_date: datetime
    delivery_type: str
    delivery_address: Optional[str] = None
    total_price: float
    status: BookingStatus
    created_at: datetime


class VehicleSummary(CamelModel):
    id: str
    make: str
    model: str
    image_url: Optional[str] = None


class AgencySummary(CamelModel):
    id: str
    name: str
    logo_url: Optional[str] = None


class CustomerSummary(CamelModel):
    id: str
    name: Optional[str] = None
    profile_photo_url: Optional[str] = None
    average_rating: float


class UserBookingResponse(BookingResponse):
    vehicle: VehicleSummary
    agency: AgencySummary


class AgencyBookingResponse(BookingResponse):
    vehicle: VehicleSummary
    user: CustomerSummary


class CreatedResponse(BaseModel):
    id: str
    status: str


class SuccessResponse(BaseModel):
    success: bool = True


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str


class AuthErrorResponse(BaseModel):
    code: str
    message: str
