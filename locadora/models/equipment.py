from decimal import Decimal

from locadora.extensions import db
from locadora.models.base import IdType, TimestampMixin, new_id
from locadora.models.enums import RentalPeriod

PERIOD_PRICE_FIELDS = {
    RentalPeriod.DAILY: "price_daily",
    RentalPeriod.WEEKLY: "price_weekly",
    RentalPeriod.FORTNIGHTLY: "price_fortnightly",
    RentalPeriod.MONTHLY: "price_monthly",
}


class Equipment(TimestampMixin, db.Model):
    __tablename__ = "equipment"

    id = db.Column(IdType, primary_key=True, default=new_id)
    owner_id = db.Column(IdType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(140), nullable=False, index=True)
    category = db.Column(db.String(80), nullable=False, default="", index=True)
    # Single-unit identifier kept from records created before asset units existed.
    asset_tag = db.Column(db.String(64), nullable=True)
    purchase_value = db.Column(db.Numeric(12, 2), nullable=True)
    price_daily = db.Column(db.Numeric(10, 2), nullable=True)
    price_weekly = db.Column(db.Numeric(10, 2), nullable=True)
    price_fortnightly = db.Column(db.Numeric(10, 2), nullable=True)
    price_monthly = db.Column(db.Numeric(10, 2), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    owner = db.relationship("User", back_populates="equipment")
    asset_units = db.relationship(
        "AssetUnit",
        back_populates="equipment",
        order_by="AssetUnit.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (db.CheckConstraint("quantity >= 0", name="ck_equipment_quantity_non_negative"),)

    @property
    def is_serialized(self):
        return bool(self.asset_units)

    def price_for(self, period):
        return getattr(self, PERIOD_PRICE_FIELDS[RentalPeriod(period)])

    def available_periods(self):
        return [
            period
            for period in PERIOD_PRICE_FIELDS
            if self.price_for(period) is not None and Decimal(str(self.price_for(period))) > 0
        ]

    def first_available_price(self):
        """Return ``(period, price)`` for the shortest priced period, or ``None``."""
        for period in self.available_periods():
            return period, Decimal(str(self.price_for(period)))
        return None

    @property
    def default_price(self):
        first = self.first_available_price()
        return first[1] if first else None


class AssetUnit(db.Model):
    """An individually numbered physical unit of an equipment type."""

    __tablename__ = "asset_units"

    id = db.Column(IdType, primary_key=True, default=new_id)
    equipment_id = db.Column(IdType, db.ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False, index=True)
    code = db.Column(db.String(64), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    equipment = db.relationship("Equipment", back_populates="asset_units")

    __table_args__ = (db.UniqueConstraint("equipment_id", "code", name="uq_asset_unit_code"),)
