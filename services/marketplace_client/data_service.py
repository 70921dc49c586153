from typing import Callable, Optional, TypeVar
import logging

import httpx

from .client import ApiClient
from .local_store import LocalStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACTIVE_STATUSES = ("confirmed", "in_progress")


class DataService:
    """Marketplace data access for the app.

    Calls go to the API; when the backend cannot be reached and a local store
    is configured, the same call is answered from the local store instead.
    HTTP errors from a reachable backend are never masked.
    """

    def __init__(self, api: ApiClient, local: Optional[LocalStore] = None):
        self.api = api
        self.local = local

    def _call(self, name: str, remote: Callable[[], T], fallback: Callable[[LocalStore], T]) -> T:
        try:
            return remote()
        except httpx.TransportError:
            if self.local is None:
                raise
            logger.warning(f"Backend unreachable, answering {name} from the local store")
            return fallback(self.local)

    def register(self, payload: dict) -> dict:
        return self._call("register", lambda: self.api.post("/auth/register", payload),
                          lambda local: local.register(payload))

    def login(self, email: str, password: str) -> dict:
        payload = {"email": email, "password": password}
        return self._call("login", lambda: self.api.post("/auth/login", payload),
                          lambda local: local.login(payload))

    def get_user(self, user_id: str) -> dict:
        return self._call("get_user", lambda: self.api.get(f"/users/{user_id}"),
                          lambda local: local.get_user(user_id))

    def get_agencies(self) -> list[dict]:
        return self._call("get_agencies", lambda: self.api.get("/agencies"),
                          lambda local: local.get_agencies())

    def get_all_vehicles(self) -> list[dict]:
        return self._call("get_all_vehicles", lambda: self.api.get("/vehicles"),
                          lambda local: local.get_all_vehicles())

    def get_vehicles_by_agency(self, agency_id: str) -> list[dict]:
        return self._call("get_vehicles_by_agency", lambda: self.api.get(f"/agencies/{agency_id}/vehicles"),
                          lambda local: local.get_vehicles_by_agency(agency_id))

    def get_reviews_by_agency(self, agency_id: str) -> list[dict]:
        return self._call("get_reviews_by_agency", lambda: self.api.get(f"/agencies/{agency_id}/reviews"),
                          lambda local: local.get_reviews_by_agency(agency_id))

    def create_review(self, review: dict) -> str:
        result = self._call("create_review", lambda: self.api.post("/reviews", review),
                            lambda local: local.create_review(review))
        return result["id"]

    def get_manager_agency(self, agency_name: Optional[str]) -> Optional[dict]:
        """The agency a manager signed up with, matched by name."""
        if not agency_name:
            return None
        return next((a for a in self.get_agencies() if a.get("name") == agency_name), None)

    def create_vehicle(self, vehicle: dict) -> str:
        result = self._call("create_vehicle", lambda: self.api.post("/vehicles", vehicle),
                            lambda local: local.create_vehicle(vehicle))
        return result["id"]

    def update_vehicle(self, vehicle_id: str, updates: dict) -> dict:
        return self._call("update_vehicle", lambda: self.api.put(f"/vehicles/{vehicle_id}", updates),
                          lambda local: local.update_vehicle(vehicle_id, updates))

    def delete_vehicle(self, vehicle_id: str) -> dict:
        return self._call("delete_vehicle", lambda: self.api.delete(f"/vehicles/{vehicle_id}"),
                          lambda local: local.delete_vehicle(vehicle_id))

    def get_bookings_by_user(self, user_id: str) -> list[dict]:
        return self._call("get_bookings_by_user", lambda: self.api.get("/bookings/my", params={"userId": user_id}),
                          lambda local: local.get_bookings_by_user(user_id))

    def get_bookings_by_agency(self, agency_id: str) -> list[dict]:
        return self._call("get_bookings_by_agency", lambda: self.api.get(f"/bookings/agency/{agency_id}"),
                          lambda local: local.get_bookings_by_agency(agency_id))

    def create_booking(self, booking: dict) -> str:
        result = self._call("create_booking", lambda: self.api.post("/bookings", booking),
                            lambda local: local.create_booking(booking))
        return result["id"]

    def update_booking_status(self, booking_id: str, status: str) -> dict:
        return self._call("update_booking_status",
                          lambda: self.api.patch(f"/bookings/{booking_id}/status", {"status": status}),
                          lambda local: local.update_booking_status(booking_id, status))


def group_bookings_by_tab(bookings: list[dict]) -> dict[str, list[dict]]:
    return {
        "pending": [b for b in bookings if b.get("status") == "pending"],
        "active": [b for b in bookings if b.get("status") in ACTIVE_STATUSES],
        "completed": [b for b in bookings if b.get("status") == "completed"],
    }
