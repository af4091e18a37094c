from decimal import Decimal

import pytest

from locadora.models import (
    DeadlineStatus,
    DeliveryStatus,
    PaymentStatus,
    PickupStatus,
    RentalStatus,
)
from locadora.services import lifecycle
from tests.helpers import DAY, NOW, build_rental


@pytest.mark.parametrize(
    "payment, pickup, expected",
    [
        (PaymentStatus.PENDING, PickupStatus.NOT_COLLECTED, RentalStatus.ACTIVE),
        (PaymentStatus.PAID, PickupStatus.NOT_COLLECTED, RentalStatus.ACTIVE),
        (PaymentStatus.PENDING, PickupStatus.COLLECTED, RentalStatus.ACTIVE),
        (PaymentStatus.PAID, PickupStatus.COLLECTED, RentalStatus.FINALIZED),
    ],
)
def test_derived_status_from_active(payment, pickup, expected):
    assert lifecycle.derive_rental_status(RentalStatus.ACTIVE, payment, pickup) == expected


def test_finalized_is_sticky():
    status = lifecycle.derive_rental_status(RentalStatus.FINALIZED, PaymentStatus.PENDING, PickupStatus.NOT_COLLECTED)

    assert status == RentalStatus.FINALIZED


def test_payment_then_pickup_finalizes():
    rental = build_rental()

    lifecycle.confirm_payment(rental, NOW + 1)
    assert rental.status == RentalStatus.ACTIVE
    lifecycle.confirm_pickup(rental, NOW + 2)

    assert rental.status == RentalStatus.FINALIZED
    assert rental.paid_at == NOW + 1
    assert rental.collected_at == NOW + 2


def test_confirm_payment_twice_keeps_first_timestamp():
    rental = build_rental()

    lifecycle.confirm_payment(rental, NOW + 10)
    lifecycle.confirm_payment(rental, NOW + 99)

    assert rental.payment_status == PaymentStatus.PAID
    assert rental.paid_at == NOW + 10


def test_delivery_changes_never_touch_overall_status():
    rental = build_rental(payment_status=PaymentStatus.PAID, pickup_status=PickupStatus.COLLECTED)

    lifecycle.confirm_delivery(rental, NOW)

    assert rental.delivery_status == DeliveryStatus.DELIVERED
    assert rental.delivered_at == NOW
    assert rental.status == RentalStatus.ACTIVE


def test_schedule_then_deliver():
    rental = build_rental()

    lifecycle.schedule_delivery(rental, NOW + DAY, NOW)
    assert rental.delivery_status == DeliveryStatus.SCHEDULED
    assert rental.delivery_expected_at == NOW + DAY

    lifecycle.confirm_delivery(rental, NOW + DAY + 5)
    assert rental.delivered_at == NOW + DAY + 5


def test_invoice_flag_is_independent():
    rental = build_rental()

    lifecycle.mark_invoice_issued(rental, NOW)

    assert rental.invoice_issued is True
    assert rental.status == RentalStatus.ACTIVE


def test_renewal_reopens_payment_and_keeps_price_when_omitted():
    rental = build_rental(payment_status=PaymentStatus.PAID, paid_at=NOW)

    lifecycle.apply_renewal(rental, NOW + 60 * DAY, None, NOW + 5)

    assert rental.end_at == NOW + 60 * DAY
    assert rental.price == Decimal("500.00")
    assert rental.renewal_count == 1
    assert rental.last_renewed_at == NOW + 5
    assert rental.payment_status == PaymentStatus.PENDING
    assert rental.paid_at is None


def test_renewal_with_new_price():
    rental = build_rental(renewal_count=2)

    lifecycle.apply_renewal(rental, NOW + DAY, "650", NOW)

    assert rental.price == Decimal("650")
    assert rental.renewal_count == 3


def test_deadline_status():
    rental = build_rental(end_at=NOW + 10 * DAY)
    assert lifecycle.deadline_status(rental, NOW) == DeadlineStatus.NORMAL
    assert lifecycle.deadline_status(rental, NOW + 8 * DAY) == DeadlineStatus.DUE_SOON
    assert lifecycle.deadline_status(rental, NOW + 11 * DAY) == DeadlineStatus.OVERDUE

    rental.status = RentalStatus.FINALIZED
    assert lifecycle.deadline_status(rental, NOW + 11 * DAY) == DeadlineStatus.NORMAL


def test_confirm_pickup_twice_keeps_first_timestamp():
    rental = build_rental()

    lifecycle.confirm_pickup(rental, NOW + 10)
    lifecycle.confirm_pickup(rental, NOW + 99)

    assert rental.pickup_status == PickupStatus.COLLECTED
    assert rental.collected_at == NOW + 10
    assert rental.status == RentalStatus.ACTIVE


def test_confirm_delivery_twice_keeps_first_timestamp():
    rental = build_rental(delivery_status=DeliveryStatus.SCHEDULED, delivery_expected_at=NOW)

    lifecycle.confirm_delivery(rental, NOW + 10)
    lifecycle.confirm_delivery(rental, NOW + 99)

    assert rental.delivery_status == DeliveryStatus.DELIVERED
    assert rental.delivered_at == NOW + 10
