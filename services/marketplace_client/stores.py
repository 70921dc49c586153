"""Process-local client state.

Each store is a small dataclass that calls its subscribers after every change.
Nothing here survives a restart.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Literal, Optional

from services.marketplace_service.pricing import BookingQuote, quote_booking

from .geo import AgencyFilters, Location

Permission = Literal["granted", "denied", "undetermined"]


class DraftError(ValueError):
    pass


@dataclass
class Store:
    _listeners: list = field(default_factory=list, init=False, repr=False, compare=False)

    def subscribe(self, listener: Callable[["Store"], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)


@dataclass
class AuthStore(Store):
    user: Optional[dict] = None
    is_authenticated: bool = False
    is_loading: bool = True
    user_type: Optional[str] = None

    def set_user(self, user: Optional[dict]):
        self.user = user
        self.is_authenticated = user is not None
        self.is_loading = False
        if user is not None:
            self.user_type = user.get("userType")
        self._notify()

    def set_user_type(self, user_type: str):
        self.user_type = user_type
        self._notify()

    def logout(self):
        self.user = None
        self.is_authenticated = False
        self.user_type = None
        self._notify()


@dataclass
class LocationStore(Store):
    current_location: Optional[Location] = None
    permission: Permission = "undetermined"
    is_loading: bool = True

    def set_current_location(self, location: Optional[Location]):
        self.current_location = location
        self._notify()

    def set_permission(self, permission: Permission):
        self.permission = permission
        self._notify()

    def set_loading(self, loading: bool):
        self.is_loading = loading
        self._notify()


@dataclass
class FilterStore(Store):
    agency_filters: AgencyFilters = field(default_factory=AgencyFilters)

    def set_agency_filters(self, **changes):
        self.agency_filters = replace(self.agency_filters, **changes)
        self._notify()

    def reset_filters(self):
        self.agency_filters = AgencyFilters()
        self._notify()


@dataclass
class BookingDraftStore(Store):
    selected_vehicle: Optional[str] = None
    selected_agency: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    delivery_type: Literal["pickup", "delivery"] = "pickup"
    delivery_address: str = ""

    def set_selected_vehicle(self, vehicle_id: Optional[str]):
        self.selected_vehicle = vehicle_id
        self._notify()

    def set_selected_agency(self, agency_id: Optional[str]):
        self.selected_agency = agency_id
        self._notify()

    def set_dates(self, start: datetime, end: datetime):
        self.start_date = start
        self.end_date = end
        self._notify()

    def set_delivery_type(self, delivery_type: Literal["pickup", "delivery"]):
        self.delivery_type = delivery_type
        self._notify()

    def set_delivery_address(self, address: str):
        self.delivery_address = address
        self._notify()

    def reset_booking(self):
        self.selected_vehicle = None
        self.selected_agency = None
        self.start_date = None
        self.end_date = None
        self.delivery_type = "pickup"
        self.delivery_address = ""
        self._notify()

    def quote(self, vehicle: dict) -> BookingQuote:
        if self.start_date is None or self.end_date is None:
            raise DraftError("Please select rental dates")
        return quote_booking(
            vehicle["pricePerDay"],
            self.start_date,
            self.end_date,
            delivery_type=self.delivery_type,
            delivery_fee=vehicle.get("deliveryFee") or 0
        )

    def build_request(self, user_id: str, vehicle: dict) -> dict:
        """Booking payload in the API's camelCase shape."""
        if self.delivery_type == "delivery" and not self.delivery_address.strip():
            raise DraftError("Please enter a delivery address")
        quote = self.quote(vehicle)
        return {
            "userId": user_id,
            "vehicleId": vehicle["id"],
            "agencyId": self.selected_agency or vehicle.get("agencyId"),
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "deliveryType": self.delivery_type,
            "deliveryAddress": self.delivery_address.strip() or None,
            "totalPrice": quote.total_price,
        }
