from locadora import clock
from locadora.extensions import db
from locadora.models.base import IdType, TimestampType, new_id
from locadora.models.enums import PaymentStatus, enum_column


class PaymentObligation(db.Model):
    """One installment owed for a rental term ("recebimento")."""

    __tablename__ = "payment_obligations"

    id = db.Column(IdType, primary_key=True, default=new_id)
    owner_id = db.Column(IdType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rental_id = db.Column(IdType, nullable=False, index=True)
    client_id = db.Column(IdType, nullable=False, index=True)
    # Snapshot of the rental's line items when the obligation was raised.
    items = db.Column(db.JSON, nullable=False, default=list)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    due_at = db.Column(TimestampType, nullable=False, index=True)
    status = enum_column(PaymentStatus, nullable=False, default=PaymentStatus.PENDING, index=True)
    paid_at = db.Column(TimestampType, nullable=True)
    sequence = db.Column(db.Integer, nullable=False, default=0)  # 0 = original term, N = Nth renewal
    created_at = db.Column(TimestampType, nullable=False, default=lambda: clock.now_ms())
    version_id = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        db.UniqueConstraint("rental_id", "sequence", name="uq_obligation_rental_sequence"),
        db.Index("ix_obligations_owner_status", "owner_id", "status"),
    )

    def equipment_ids(self):
        return [item.get("equipment_id") for item in (self.items or [])]
