from datetime import datetime

import pytest

from services.marketplace_client.geo import AgencyFilters, Location
from services.marketplace_client.stores import (
    AuthStore, BookingDraftStore, DraftError, FilterStore, LocationStore
)

VEHICLE = {"id": "v3", "agencyId": "2", "pricePerDay": 350, "deliveryFee": 50}


def test_subscribers_are_notified_until_unsubscribed():
    store = LocationStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.current_location))

    store.set_current_location(Location(1, 2))
    unsubscribe()
    store.set_current_location(Location(3, 4))

    assert seen == [Location(1, 2)]
    assert store.current_location == Location(3, 4)


def test_auth_store_login_and_logout():
    store = AuthStore()
    assert store.is_loading

    store.set_user({"id": "u1", "userType": "manager"})
    assert store.is_authenticated
    assert store.user_type == "manager"
    assert not store.is_loading

    store.logout()
    assert store.user is None
    assert not store.is_authenticated
    assert store.user_type is None


def test_filter_store_partial_update_and_reset():
    store = FilterStore()
    assert store.agency_filters == AgencyFilters(radius=25, min_rating=0)

    store.set_agency_filters(radius=10)
    store.set_agency_filters(min_rating=4)
    assert store.agency_filters == AgencyFilters(radius=10, min_rating=4)

    store.reset_filters()
    assert store.agency_filters.radius == 25


def test_filter_store_rejects_filters_it_cannot_apply():
    store = FilterStore()

    with pytest.raises(TypeError):
        store.set_agency_filters(car_category="suv")

    assert store.agency_filters == AgencyFilters()


def test_booking_draft_builds_request():
    draft = BookingDraftStore()
    draft.set_selected_agency("2")
    draft.set_dates(datetime(2024, 1, 1), datetime(2024, 1, 4))

    request = draft.build_request("u1", VEHICLE)

    assert request == {
        "userId": "u1",
        "vehicleId": "v3",
        "agencyId": "2",
        "startDate": "2024-01-01T00:00:00",
        "endDate": "2024-01-04T00:00:00",
        "deliveryType": "pickup",
        "deliveryAddress": None,
        "totalPrice": 1103,
    }


def test_booking_draft_delivery_requires_address():
    draft = BookingDraftStore()
    draft.set_dates(datetime(2024, 1, 1), datetime(2024, 1, 4))
    draft.set_delivery_type("delivery")

    with pytest.raises(DraftError):
        draft.build_request("u1", VEHICLE)

    draft.set_delivery_address(" 12 Rue Atlas ")
    request = draft.build_request("u1", VEHICLE)
    assert request["deliveryAddress"] == "12 Rue Atlas"
    assert request["totalPrice"] == 1153


def test_booking_draft_needs_dates():
    with pytest.raises(DraftError):
        BookingDraftStore().quote(VEHICLE)


def test_booking_draft_reset():
    draft = BookingDraftStore()
    draft.set_selected_vehicle("v1")
    draft.set_delivery_type("delivery")

    draft.reset_booking()

    assert draft.selected_vehicle is None
    assert draft.delivery_type == "pickup"
