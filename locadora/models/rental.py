from collections import namedtuple

from locadora.extensions import db
from locadora.models.base import IdType, TimestampMixin, TimestampType, new_id
from locadora.models.enums import (
    DeliveryStatus,
    PaymentMoment,
    PaymentStatus,
    PickupStatus,
    RentalPeriod,
    RentalStatus,
    enum_column,
)

LineItem = namedtuple("LineItem", ["equipment_id", "quantity", "asset_unit_ids"])


class Rental(TimestampMixin, db.Model):
    __tablename__ = "rentals"

    id = db.Column(IdType, primary_key=True, default=new_id)
    owner_id = db.Column(IdType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = db.Column(IdType, db.ForeignKey("clients.id"), nullable=False, index=True)
    # Older single-equipment rentals have no items, only this reference.
    legacy_equipment_id = db.Column(IdType, nullable=True, index=True)

    price = db.Column(db.Numeric(12, 2), nullable=False)
    period = enum_column(RentalPeriod, nullable=False, default=RentalPeriod.DAILY)
    payment_moment = enum_column(PaymentMoment, nullable=False, default=PaymentMoment.AT_DUE_DATE)
    start_at = db.Column(TimestampType, nullable=False)
    end_at = db.Column(TimestampType, nullable=False, index=True)
    include_saturday = db.Column(db.Boolean, nullable=False, default=False)
    include_sunday = db.Column(db.Boolean, nullable=False, default=False)

    delivery_status = enum_column(DeliveryStatus, nullable=False, default=DeliveryStatus.NOT_SCHEDULED)
    delivery_expected_at = db.Column(TimestampType, nullable=True)
    delivered_at = db.Column(TimestampType, nullable=True)
    payment_status = enum_column(PaymentStatus, nullable=False, default=PaymentStatus.PENDING)
    paid_at = db.Column(TimestampType, nullable=True)
    pickup_status = enum_column(PickupStatus, nullable=False, default=PickupStatus.NOT_COLLECTED)
    collected_at = db.Column(TimestampType, nullable=True)

    invoice_requested = db.Column(db.Boolean, nullable=False, default=False)
    invoice_issued = db.Column(db.Boolean, nullable=False, default=False)

    status = enum_column(RentalStatus, nullable=False, default=RentalStatus.ACTIVE, index=True)
    renewal_count = db.Column(db.Integer, nullable=False, default=0)
    last_renewed_at = db.Column(TimestampType, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    version_id = db.Column(db.Integer, nullable=False)

    owner = db.relationship("User", back_populates="rentals")
    client = db.relationship("Client", back_populates="rentals")
    items = db.relationship(
        "RentalItem",
        back_populates="rental",
        order_by="RentalItem.position",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        db.Index("ix_rentals_owner_status", "owner_id", "status"),
        db.CheckConstraint("renewal_count >= 0", name="ck_rental_renewal_count"),
    )

    def line_items(self):
        if self.items:
            return [item.as_line_item() for item in self.items]
        if self.legacy_equipment_id:
            return [LineItem(self.legacy_equipment_id, 1, ())]
        return []

    def equipment_ids(self):
        return [item.equipment_id for item in self.line_items()]


class RentalItem(db.Model):
    __tablename__ = "rental_items"

    id = db.Column(IdType, primary_key=True, default=new_id)
    rental_id = db.Column(IdType, db.ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True)
    # Plain reference: deleting catalog entries leaves past rentals untouched.
    equipment_id = db.Column(IdType, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    asset_unit_ids = db.Column(db.JSON, nullable=False, default=list)
    position = db.Column(db.Integer, nullable=False, default=0)

    rental = db.relationship("Rental", back_populates="items")

    __table_args__ = (db.CheckConstraint("quantity > 0", name="ck_rental_item_quantity_positive"),)

    def as_line_item(self):
        return LineItem(self.equipment_id, self.quantity or 0, tuple(self.asset_unit_ids or ()))
