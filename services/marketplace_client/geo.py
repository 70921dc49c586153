from dataclasses import dataclass
from typing import Optional
import math

EARTH_RADIUS_KM = 6371.0
FEATURED_VEHICLE_LIMIT = 5


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AgencyFilters:
    radius: float = 25
    min_rating: float = 0


def haversine_km(origin: Location, target: Location) -> float:
    lat1, lat2 = math.radians(origin.latitude), math.radians(target.latitude)
    d_lat = lat2 - lat1
    d_lng = math.radians(target.longitude - origin.longitude)
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def agency_distance(agency: dict, origin: Optional[Location]) -> Optional[float]:
    lat, lng = agency.get("locationLat"), agency.get("locationLng")
    if origin is None or lat is None or lng is None:
        return None
    return haversine_km(origin, Location(lat, lng))


def nearby_agencies(
    agencies: list[dict],
    origin: Optional[Location],
    filters: AgencyFilters = AgencyFilters(),
    search: str = ""
) -> list[dict]:
    """Agencies within the radius and rating floor, nearest first.

    Each returned agency is a copy carrying a ``distance`` key in km. When the
    current location (or the agency's) is unknown the distance counts as 0, so
    the agency is never dropped by the radius filter.
    """
    query = search.strip().lower()
    result = []
    for agency in agencies:
        distance = agency_distance(agency, origin)
        if (distance or 0) > filters.radius:
            continue
        if (agency.get("rating") or 0) < filters.min_rating:
            continue
        if query and query not in (agency.get("name") or "").lower() \
                and query not in (agency.get("address") or "").lower():
            continue
        result.append({**agency, "distance": distance})

    result.sort(key=lambda a: a["distance"] or 0)
    return result


def featured_vehicles(vehicles: list[dict], limit: int = FEATURED_VEHICLE_LIMIT) -> list[dict]:
    return [v for v in vehicles if v.get("isAvailable")][:limit]
