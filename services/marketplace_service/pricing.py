"""Booking price computation shared by the API and the client.

A rental is billed per started day with a one day minimum. The total is the
base price plus the delivery fee (delivery bookings only) plus a 5% service
fee rounded half up to a whole unit.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
import math

SERVICE_FEE_RATE = 0.05
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class BookingQuote:
    days: int
    daily_rate: float
    base_price: float
    delivery_fee: float
    service_fee: float
    total_price: float


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def rental_days(start: datetime, end: datetime) -> int:
    seconds = abs((_as_utc(end) - _as_utc(start)).total_seconds())
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def quote_booking(
    daily_rate: float,
    start: datetime,
    end: datetime,
    delivery_type: str = "pickup",
    delivery_fee: float = 0.0
) -> BookingQuote:
    days = rental_days(start, end)
    base_price = days * daily_rate
    fee = (delivery_fee or 0.0) if delivery_type == "delivery" else 0.0
    service_fee = round_half_up(base_price * SERVICE_FEE_RATE)
    return BookingQuote(
        days=days,
        daily_rate=daily_rate,
        base_price=base_price,
        delivery_fee=fee,
        service_fee=service_fee,
        total_price=base_price + fee + service_fee
    )
