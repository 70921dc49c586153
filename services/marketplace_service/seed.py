import logging

from sqlalchemy.orm import Session

from .models import Agency, Vehicle

logger = logging.getLogger(__name__)

AGENCIES = [
    {
        "id": "1",
        "name": "Premium Cars",
        "description": "Luxury car rentals",
        "location_lat": 34.020882,
        "location_lng": -6.841650,
        "address": "Rabat Agdal",
        "logo_url": "https://images.unsplash.com/photo-1560179707-f14e90ef3623?w=200",
        "rating": 4.8,
        "total_reviews": 120,
        "min_price": 500,
    },
    {
        "id": "2",
        "name": "City Drive",
        "description": "Affordable city cars",
        "location_lat": 33.573110,
        "location_lng": -7.589843,
        "address": "Casablanca Maarif",
        "logo_url": "https://images.unsplash.com/photo-1549317661-bd32c8ce0db2?w=200",
        "rating": 4.5,
        "total_reviews": 85,
        "min_price": 300,
    },
]

VEHICLES = [
    {
        "id": "v1", "agency_id": "1", "make": "Mercedes", "model": "C-Class", "year": 2023,
        "category": "Luxury", "price_per_day": 1200,
        "image_url": "https://images.unsplash.com/photo-1618843479313-40f8afb4b4d8?w=800",
        "transmission": "Automatic", "fuel_type": "Diesel", "seats": 5, "rating": 4.9,
        "total_trips": 45, "features": ["GPS", "Leather Seats"],
    },
    {
        "id": "v2", "agency_id": "1", "make": "BMW", "model": "3 Series", "year": 2023,
        "category": "Luxury", "price_per_day": 1300,
        "image_url": "https://images.unsplash.com/photo-1555215695-3004980adade?w=800",
        "transmission": "Automatic", "fuel_type": "Petrol", "seats": 5, "rating": 4.8,
        "total_trips": 32, "features": ["Sunroof", "Bluetooth"],
    },
    {
        "id": "v3", "agency_id": "2", "make": "Renault", "model": "Clio 5", "year": 2024,
        "category": "Economy", "price_per_day": 350,
        "image_url": "https://images.unsplash.com/photo-1621007947382-bb3c3968e3bb?w=800",
        "transmission": "Manual", "fuel_type": "Diesel", "seats": 5, "rating": 4.6,
        "total_trips": 89, "features": ["Bluetooth", "AC"],
    },
    {
        "id": "v4", "agency_id": "2", "make": "Dacia", "model": "Logan", "year": 2023,
        "category": "Economy", "price_per_day": 300,
        "image_url": "https://images.unsplash.com/photo-1541899481282-d53bffe3c35d?w=800",
        "transmission": "Manual", "fuel_type": "Diesel", "seats": 5, "rating": 4.4,
        "total_trips": 120, "features": ["AC"],
    },
]


def seed_if_empty(db: Session) -> bool:
    """Insert the demo agencies and vehicles unless agencies already exist."""
    if db.query(Agency).count() > 0:
        logger.info("Database already seeded.")
        return False

    logger.info("Seeding data...")
    agencies = {}
    for row in AGENCIES:
        agency = Agency(**row)
        agencies[agency.id] = agency
        db.add(agency)

    for row in VEHICLES:
        agency = agencies[row["agency_id"]]
        db.add(Vehicle(
            **row,
            is_available=True,
            images=[],
            location_lat=agency.location_lat,
            location_lng=agency.location_lng,
            address=agency.address
        ))

    db.commit()
    logger.info("Seeding complete.")
    return True
