"""Status rules for a single rental.

These functions only mutate the rental object they are given; loading and
persisting it is left to ``RentalService``.
"""

from decimal import Decimal

from locadora.clock import MILLIS_PER_DAY
from locadora.models import (
    DeadlineStatus,
    DeliveryStatus,
    PaymentStatus,
    PickupStatus,
    RentalStatus,
)


def derive_rental_status(current, payment_status, pickup_status):
    # FINALIZED is sticky: clearing payment or pickup never reopens a rental.
    if current == RentalStatus.FINALIZED:
        return RentalStatus.FINALIZED
    if payment_status == PaymentStatus.PAID and pickup_status == PickupStatus.COLLECTED:
        return RentalStatus.FINALIZED
    return RentalStatus.ACTIVE


def refresh_status(rental):
    rental.status = derive_rental_status(rental.status, rental.payment_status, rental.pickup_status)
    return rental.status


def schedule_delivery(rental, when, now):
    rental.delivery_status = DeliveryStatus.SCHEDULED
    rental.delivery_expected_at = when
    rental.updated_at = now


def confirm_delivery(rental, now):
    if rental.delivery_status != DeliveryStatus.DELIVERED:
        rental.delivery_status = DeliveryStatus.DELIVERED
        rental.delivered_at = now
        rental.updated_at = now


def confirm_payment(rental, now):
    if rental.payment_status != PaymentStatus.PAID:
        rental.payment_status = PaymentStatus.PAID
        rental.paid_at = now
        rental.updated_at = now
    refresh_status(rental)


def confirm_pickup(rental, now):
    if rental.pickup_status != PickupStatus.COLLECTED:
        rental.pickup_status = PickupStatus.COLLECTED
        rental.collected_at = now
        rental.updated_at = now
    refresh_status(rental)


def mark_invoice_issued(rental, now):
    rental.invoice_issued = True
    rental.updated_at = now


def apply_renewal(rental, new_end, new_price, now):
    """Extend the term and reopen payment, even if the previous term was paid."""
    rental.end_at = new_end
    if new_price is not None:
        rental.price = Decimal(str(new_price))
    rental.renewal_count = (rental.renewal_count or 0) + 1
    rental.last_renewed_at = now
    rental.payment_status = PaymentStatus.PENDING
    rental.paid_at = None
    rental.updated_at = now
    refresh_status(rental)


def deadline_status(rental, now, due_soon_days=2):
    if rental.status == RentalStatus.FINALIZED:
        return DeadlineStatus.NORMAL
    if rental.end_at < now:
        return DeadlineStatus.OVERDUE
    if rental.end_at - now <= due_soon_days * MILLIS_PER_DAY:
        return DeadlineStatus.DUE_SOON
    return DeadlineStatus.NORMAL
