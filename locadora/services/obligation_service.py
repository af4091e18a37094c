from decimal import Decimal

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError

from locadora import clock
from locadora.extensions import db
from locadora.models import PaymentMoment, PaymentObligation, PaymentStatus, PickupStatus, Rental
from locadora.services.store import commit, get_owned, require_owner


def build_obligation(rental, sequence, due_at=None):
    return PaymentObligation(
        owner_id=rental.owner_id,
        rental_id=rental.id,
        client_id=rental.client_id,
        items=[
            {
                "equipment_id": item.equipment_id,
                "quantity": item.quantity,
                "asset_unit_ids": list(item.asset_unit_ids),
            }
            for item in rental.line_items()
        ],
        amount=Decimal(str(rental.price)),
        due_at=rental.end_at if due_at is None else due_at,
        status=PaymentStatus.PENDING,
        sequence=sequence,
    )


def _total(obligations, status):
    return sum(
        (Decimal(str(obligation.amount)) for obligation in obligations if obligation.status == status),
        Decimal("0.00"),
    )


def pending_total(obligations):
    return _total(obligations, PaymentStatus.PENDING)


def paid_total(obligations):
    return _total(obligations, PaymentStatus.PAID)


class ObligationService:
    @staticmethod
    def _list(query, label):
        # List views degrade to empty instead of failing the whole screen.
        try:
            return query.all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.warning("Could not load %s obligations: %s", label, exc)
            return []

    @staticmethod
    def create_for_rental(rental, sequence=0, due_at=None):
        """Stage the obligation for ``rental``'s current term; the caller commits.

        ``due_at`` defaults to the rental's expected end.
        """
        obligation = build_obligation(rental, sequence, due_at)
        db.session.add(obligation)
        db.session.flush()
        current_app.logger.info(
            "Obligation %s raised for rental %s (sequence %s, amount %s)",
            obligation.id,
            rental.id,
            sequence,
            obligation.amount,
        )
        return obligation.id

    @staticmethod
    def get(owner_id, obligation_id):
        return get_owned(PaymentObligation, owner_id, obligation_id, "Payment obligation")

    @staticmethod
    def mark_paid(owner_id, obligation_id):
        obligation = ObligationService.get(owner_id, obligation_id)
        if obligation.status == PaymentStatus.PAID:
            return obligation
        obligation.status = PaymentStatus.PAID
        obligation.paid_at = clock.now_ms()
        commit()
        current_app.logger.info("Obligation %s marked paid", obligation.id)
        return obligation

    @staticmethod
    def list_pending(owner_id):
        require_owner(owner_id)
        query = PaymentObligation.query.filter_by(owner_id=owner_id, status=PaymentStatus.PENDING).order_by(
            PaymentObligation.due_at.asc()
        )
        return ObligationService._list(query, "pending")

    @staticmethod
    def list_paid(owner_id):
        require_owner(owner_id)
        query = PaymentObligation.query.filter_by(owner_id=owner_id, status=PaymentStatus.PAID).order_by(
            func.coalesce(PaymentObligation.paid_at, PaymentObligation.created_at).desc()
        )
        return ObligationService._list(query, "paid")

    @staticmethod
    def list_for_rental(owner_id, rental_id):
        require_owner(owner_id)
        query = PaymentObligation.query.filter_by(owner_id=owner_id, rental_id=rental_id).order_by(
            PaymentObligation.sequence.asc()
        )
        return ObligationService._list(query, "rental")

    @staticmethod
    def list_overdue(owner_id, now=None):
        require_owner(owner_id)
        now = clock.now_ms() if now is None else now
        query = (
            PaymentObligation.query.filter_by(owner_id=owner_id, status=PaymentStatus.PENDING)
            .filter(PaymentObligation.due_at < now)
            .order_by(PaymentObligation.due_at.asc())
        )
        return ObligationService._list(query, "overdue")

    @staticmethod
    def list_receivable(owner_id, now=None):
        """Pending obligations the owner can collect now.

        Rentals paid up front are collectable at once; the others once the
        equipment is back or the term has ended.
        """
        require_owner(owner_id)
        now = clock.now_ms() if now is None else now
        query = (
            PaymentObligation.query.join(Rental, Rental.id == PaymentObligation.rental_id)
            .filter(
                PaymentObligation.owner_id == owner_id,
                PaymentObligation.status == PaymentStatus.PENDING,
                or_(
                    Rental.payment_moment == PaymentMoment.AT_START,
                    Rental.pickup_status == PickupStatus.COLLECTED,
                    Rental.end_at <= now,
                ),
            )
            .order_by(PaymentObligation.due_at.asc())
        )
        return ObligationService._list(query, "receivable")

    @staticmethod
    def totals(owner_id):
        return {
            "pending": pending_total(ObligationService.list_pending(owner_id)),
            "paid": paid_total(ObligationService.list_paid(owner_id)),
        }

    @staticmethod
    def delete_for_rental(owner_id, rental_id):
        """Stage removal of every obligation of a rental; the caller commits."""
        require_owner(owner_id)
        return PaymentObligation.query.filter_by(owner_id=owner_id, rental_id=rental_id).delete(
            synchronize_session=False
        )

    @staticmethod
    def delete(owner_id, obligation_id):
        obligation = ObligationService.get(owner_id, obligation_id)
        db.session.delete(obligation)
        commit()
        current_app.logger.info("Obligation %s deleted", obligation_id)
