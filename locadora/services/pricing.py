from datetime import datetime, timedelta, timezone
from decimal import Decimal

from locadora.clock import MILLIS_PER_DAY
from locadora.errors import AppError
from locadora.models import RentalPeriod

SATURDAY = 5
SUNDAY = 6


def _utc_date(ms):
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).date()


def end_date_for(start_ms, period):
    return start_ms + RentalPeriod(period).days * MILLIS_PER_DAY


def count_rental_days(start_ms, end_ms, include_saturday=True, include_sunday=True):
    """Calendar days in ``[start, end)``, optionally skipping weekend days."""
    current = _utc_date(start_ms)
    last = _utc_date(end_ms)
    days = 0
    while current < last:
        weekday = current.weekday()
        if weekday == SATURDAY and not include_saturday:
            pass
        elif weekday == SUNDAY and not include_sunday:
            pass
        else:
            days += 1
        current += timedelta(days=1)
    return days


def common_periods(equipments):
    """Periods every given equipment has a price for, shortest first."""
    period_sets = [set(equipment.available_periods()) for equipment in equipments]
    if not period_sets:
        return []
    return sorted(set.intersection(*period_sets), key=lambda period: period.days)


def quote_price(lines, period, start_ms, end_ms, include_saturday=False, include_sunday=False):
    """Suggested rental price for ``lines``, an iterable of ``(equipment, quantity)``.

    Daily rentals are charged per counted day; longer periods are charged
    once at the period price.
    """
    period = RentalPeriod(period)
    if period == RentalPeriod.DAILY:
        multiplier = count_rental_days(start_ms, end_ms, include_saturday, include_sunday)
    else:
        multiplier = 1

    total = Decimal("0.00")
    for equipment, quantity in lines:
        price = equipment.price_for(period)
        if price is None:
            raise AppError(f"{equipment.name} has no {period.value.lower()} price.", 400)
        total += Decimal(str(price)) * Decimal(quantity) * Decimal(multiplier)
    return total.quantize(Decimal("0.01"))
