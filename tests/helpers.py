"""In-memory builders for tests that never touch the database."""

from decimal import Decimal

from locadora.models import (
    AssetUnit,
    DeliveryStatus,
    Equipment,
    PaymentStatus,
    PickupStatus,
    Rental,
    RentalItem,
    RentalStatus,
)

NOW = 1_700_000_000_000
DAY = 24 * 60 * 60 * 1000


class FrozenClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, millis):
        self.now += millis
        return self.now


def build_equipment(equipment_id="eq-mixer", name="Mixer", quantity=1, units=(), **prices):
    equipment = Equipment(id=equipment_id, name=name, category="Concrete", quantity=quantity, **prices)
    equipment.asset_units = [
        AssetUnit(id=unit_id, code=code, position=position) for position, (unit_id, code) in enumerate(units)
    ]
    return equipment


def build_rental(rental_id="r-1", items=(), status=RentalStatus.ACTIVE, legacy_equipment_id=None, **fields):
    values = {
        "owner_id": "owner-1",
        "client_id": "client-1",
        "price": Decimal("500.00"),
        "start_at": NOW,
        "end_at": NOW + 30 * DAY,
        "delivery_status": DeliveryStatus.NOT_SCHEDULED,
        "payment_status": PaymentStatus.PENDING,
        "pickup_status": PickupStatus.NOT_COLLECTED,
        "invoice_issued": False,
        "renewal_count": 0,
    }
    values.update(fields)
    rental = Rental(id=rental_id, status=status, legacy_equipment_id=legacy_equipment_id, **values)
    rental.items = [
        RentalItem(equipment_id=equipment_id, quantity=quantity, asset_unit_ids=list(unit_ids), position=position)
        for position, (equipment_id, quantity, unit_ids) in enumerate(items)
    ]
    return rental
