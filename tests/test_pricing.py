from decimal import Decimal

import pytest

from locadora.errors import AppError
from locadora.models import RentalPeriod
from locadora.services.pricing import common_periods, count_rental_days, end_date_for, quote_price
from tests.helpers import DAY, build_equipment

# 2024-01-01 00:00 UTC, a Monday.
MONDAY = 1_704_067_200_000


def test_count_rental_days_weekend_rules():
    next_monday = MONDAY + 7 * DAY

    assert count_rental_days(MONDAY, next_monday) == 7
    assert count_rental_days(MONDAY, next_monday, include_saturday=False, include_sunday=False) == 5
    assert count_rental_days(MONDAY, next_monday, include_saturday=True, include_sunday=False) == 6
    assert count_rental_days(MONDAY, MONDAY) == 0


def test_end_date_for_period():
    assert end_date_for(MONDAY, RentalPeriod.WEEKLY) == MONDAY + 7 * DAY
    assert end_date_for(MONDAY, "MONTHLY") == MONDAY + 30 * DAY


def test_available_and_common_periods():
    mixer = build_equipment(price_daily=Decimal("50"), price_monthly=Decimal("900"))
    drill = build_equipment("eq-drill", "Drill", price_daily=Decimal("20"), price_weekly=Decimal("100"))

    assert mixer.available_periods() == [RentalPeriod.DAILY, RentalPeriod.MONTHLY]
    assert mixer.default_price == Decimal("50")
    assert common_periods([mixer, drill]) == [RentalPeriod.DAILY]
    assert common_periods([]) == []


def test_daily_quote_counts_business_days():
    mixer = build_equipment(price_daily=Decimal("50.00"))

    price = quote_price([(mixer, 2)], RentalPeriod.DAILY, MONDAY, MONDAY + 7 * DAY)

    assert price == Decimal("500.00")


def test_period_quote_is_flat():
    mixer = build_equipment(price_weekly=Decimal("300.00"))
    drill = build_equipment("eq-drill", "Drill", price_weekly=Decimal("80.00"))

    price = quote_price([(mixer, 1), (drill, 3)], RentalPeriod.WEEKLY, MONDAY, MONDAY + 7 * DAY)

    assert price == Decimal("540.00")


def test_quote_rejects_unpriced_period():
    mixer = build_equipment(price_daily=Decimal("50.00"))

    with pytest.raises(AppError):
        quote_price([(mixer, 1)], RentalPeriod.MONTHLY, MONDAY, MONDAY + 30 * DAY)
