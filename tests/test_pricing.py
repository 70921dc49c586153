from datetime import datetime, timedelta, timezone

from services.marketplace_service.pricing import quote_booking, rental_days, round_half_up

START = datetime(2024, 1, 1)


def test_three_day_pickup_quote():
    quote = quote_booking(1200, START, START + timedelta(days=3))

    assert quote.days == 3
    assert quote.base_price == 3600
    assert quote.delivery_fee == 0
    assert quote.service_fee == 180
    assert quote.total_price == 3780


def test_delivery_fee_only_applies_to_delivery():
    pickup = quote_booking(300, START, START + timedelta(days=2), "pickup", delivery_fee=40)
    delivery = quote_booking(300, START, START + timedelta(days=2), "delivery", delivery_fee=40)

    assert pickup.total_price == 630
    assert delivery.delivery_fee == 40
    assert delivery.total_price == 670


def test_rental_is_at_least_one_day():
    assert rental_days(START, START) == 1


def test_started_day_is_billed():
    assert rental_days(START, START + timedelta(days=2, hours=1)) == 3


def test_reversed_dates_count_the_same():
    assert rental_days(START + timedelta(days=4), START) == 4


def test_naive_and_aware_dates_mix():
    aware = datetime(2024, 1, 3, tzinfo=timezone.utc)

    assert rental_days(START, aware) == 2


def test_service_fee_rounds_half_up():
    assert round_half_up(52.5) == 53
    assert round_half_up(0.5) == 1
    assert quote_booking(10, START, START + timedelta(days=1)).service_fee == 1
