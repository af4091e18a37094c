from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from locadora.errors import NotFoundError, UnauthenticatedError
from locadora.models import PaymentMoment, PaymentObligation, PaymentStatus
from locadora.services import ObligationService, RenewalService, RentalService
from tests.helpers import DAY, NOW


def _line(equipment, quantity=1):
    return [{"equipment_id": equipment.id, "quantity": quantity}]


def test_booking_raises_first_obligation(owner, make_equipment, make_rental):
    mixer = make_equipment(quantity=2)
    rental = make_rental(_line(mixer, 2), price="500.00", end_at=NOW + 10 * DAY)

    rows = ObligationService.list_for_rental(owner.id, rental.id)

    assert len(rows) == 1
    obligation = rows[0]
    assert obligation.sequence == 0
    assert obligation.amount == Decimal("500.00")
    assert obligation.due_at == NOW + 10 * DAY
    assert obligation.status == PaymentStatus.PENDING
    assert obligation.client_id == rental.client_id
    assert obligation.items == [{"equipment_id": mixer.id, "quantity": 2, "asset_unit_ids": []}]


def test_mark_paid_is_idempotent(owner, make_equipment, make_rental, frozen_clock):
    rental = make_rental(_line(make_equipment()))
    obligation_id = ObligationService.list_for_rental(owner.id, rental.id)[0].id

    frozen_clock.advance(1000)
    first = ObligationService.mark_paid(owner.id, obligation_id)
    paid_at = first.paid_at
    frozen_clock.advance(1000)
    second = ObligationService.mark_paid(owner.id, obligation_id)

    assert second.status == PaymentStatus.PAID
    assert second.paid_at == paid_at == NOW + 1000


def test_pending_and_paid_views(owner, make_equipment, make_rental, frozen_clock):
    late = make_rental(_line(make_equipment("Mixer")), price="300.00", end_at=NOW + 20 * DAY)
    early = make_rental(_line(make_equipment("Drill")), price="200.00", end_at=NOW + 5 * DAY)
    other = make_rental(_line(make_equipment("Saw")), price="100.00", end_at=NOW + 9 * DAY)

    assert [row.rental_id for row in ObligationService.list_pending(owner.id)] == [early.id, other.id, late.id]

    for rental in (late, other):
        frozen_clock.advance(DAY)
        ObligationService.mark_paid(owner.id, ObligationService.list_for_rental(owner.id, rental.id)[0].id)

    assert [row.rental_id for row in ObligationService.list_paid(owner.id)] == [other.id, late.id]
    assert ObligationService.totals(owner.id) == {"pending": Decimal("200.00"), "paid": Decimal("400.00")}


def test_overdue_lists_only_pending_past_due(owner, make_equipment, make_rental, frozen_clock):
    overdue = make_rental(_line(make_equipment("Mixer")), end_at=NOW - DAY)
    make_rental(_line(make_equipment("Drill")), end_at=NOW + DAY)
    settled = make_rental(_line(make_equipment("Saw")), end_at=NOW - 2 * DAY)
    ObligationService.mark_paid(owner.id, ObligationService.list_for_rental(owner.id, settled.id)[0].id)

    rows = ObligationService.list_overdue(owner.id)

    assert [row.rental_id for row in rows] == [overdue.id]
    assert len(ObligationService.list_overdue(owner.id, now=NOW + 2 * DAY)) == 2


def test_delete_for_rental_removes_every_term(owner, make_equipment, make_rental, db_session):
    rental = make_rental(_line(make_equipment()))
    keep = make_rental(_line(make_equipment("Drill")))

    removed = ObligationService.delete_for_rental(owner.id, rental.id)
    db_session.commit()

    assert removed == 1
    assert ObligationService.list_for_rental(owner.id, rental.id) == []
    assert len(ObligationService.list_for_rental(owner.id, keep.id)) == 1


def test_delete_single_obligation(owner, make_equipment, make_rental):
    rental = make_rental(_line(make_equipment()))
    obligation_id = ObligationService.list_for_rental(owner.id, rental.id)[0].id

    ObligationService.delete(owner.id, obligation_id)

    with pytest.raises(NotFoundError):
        ObligationService.get(owner.id, obligation_id)


def test_obligations_require_an_owner(app):
    with pytest.raises(UnauthenticatedError):
        ObligationService.list_pending(None)
    with pytest.raises(UnauthenticatedError):
        ObligationService.mark_paid("", "missing")


class BrokenQuery:
    def join(self, *args, **kwargs):
        return self

    def filter_by(self, **kwargs):
        return self

    def filter(self, *criteria):
        return self

    def order_by(self, *clauses):
        return self

    def all(self):
        raise OperationalError("SELECT", {}, Exception("database is locked"))


def test_list_views_fail_open(owner, monkeypatch):
    monkeypatch.setattr(PaymentObligation, "query", BrokenQuery())

    assert ObligationService.list_pending(owner.id) == []
    assert ObligationService.list_paid(owner.id) == []
    assert ObligationService.list_for_rental(owner.id, "r-1") == []
    assert ObligationService.list_receivable(owner.id) == []
    assert ObligationService.totals(owner.id) == {"pending": Decimal("0.00"), "paid": Decimal("0.00")}


def test_paid_view_falls_back_to_creation_time(owner, make_equipment, make_rental, frozen_clock, db_session):
    mixer = make_equipment(quantity=2)
    settled = make_rental(_line(mixer))
    frozen_clock.advance(DAY)
    ObligationService.mark_paid(owner.id, ObligationService.list_for_rental(owner.id, settled.id)[0].id)

    frozen_clock.advance(4 * DAY)
    imported = make_rental(_line(mixer))
    obligation = ObligationService.list_for_rental(owner.id, imported.id)[0]
    obligation.status = PaymentStatus.PAID
    db_session.commit()

    rows = ObligationService.list_paid(owner.id)

    assert [row.rental_id for row in rows] == [imported.id, settled.id]
    assert rows[0].paid_at is None
    assert rows[0].created_at == NOW + 5 * DAY


def test_first_obligation_uses_chosen_payment_date(owner, make_equipment, make_rental):
    rental = make_rental(_line(make_equipment()), end_at=NOW + 30 * DAY, payment_due_at=NOW + 3 * DAY)

    assert ObligationService.list_for_rental(owner.id, rental.id)[0].due_at == NOW + 3 * DAY

    RenewalService.renew(owner.id, rental.id, NOW + 60 * DAY)
    renewal = ObligationService.list_for_rental(owner.id, rental.id)[1]
    assert renewal.due_at == NOW + 60 * DAY


def test_receivable_view_follows_payment_moment(owner, make_equipment, make_rental):
    mixer = make_equipment(quantity=5)
    upfront = make_rental(_line(mixer), end_at=NOW + 10 * DAY, payment_moment=PaymentMoment.AT_START.value)
    make_rental(_line(mixer), end_at=NOW + 15 * DAY)
    returned = make_rental(_line(mixer), end_at=NOW + 20 * DAY)
    RentalService.confirm_pickup(owner.id, returned.id)
    ended = make_rental(_line(mixer), end_at=NOW)
    settled = make_rental(_line(mixer), end_at=NOW + 5 * DAY, payment_moment="at_start")
    ObligationService.mark_paid(owner.id, ObligationService.list_for_rental(owner.id, settled.id)[0].id)

    rows = ObligationService.list_receivable(owner.id)

    assert [row.rental_id for row in rows] == [ended.id, upfront.id, returned.id]
    assert len(ObligationService.list_receivable(owner.id, now=NOW + 15 * DAY)) == 4
