from locadora.errors import InsufficientAvailabilityError, InvalidStateError
from locadora.models import Equipment, Rental, RentalStatus
from locadora.services.store import get_owned, require_owner


class AvailabilitySnapshot:
    """How much of one equipment type is free right now. Computed on demand, never stored."""

    def __init__(self, equipment, total, committed, committed_asset_ids):
        self.equipment = equipment
        self.total = total
        self.committed = committed
        self.committed_asset_ids = frozenset(committed_asset_ids)

    @property
    def available(self):
        return self.total - self.committed

    @property
    def is_available(self):
        return self.available > 0

    def available_asset_units(self):
        return [unit for unit in self.equipment.asset_units if unit.id not in self.committed_asset_ids]

    def to_dict(self):
        return {
            "equipment_id": self.equipment.id,
            "total": self.total,
            "committed": self.committed,
            "available": self.available,
            "is_available": self.is_available,
            "committed_asset_unit_ids": sorted(self.committed_asset_ids),
            "available_asset_units": [
                {"id": unit.id, "code": unit.code, "description": unit.description}
                for unit in self.available_asset_units()
            ],
        }


def _active(rentals):
    return [rental for rental in rentals if rental.status == RentalStatus.ACTIVE]


def availability_for(equipment, active_rentals):
    """Count what the active rentals commit of ``equipment``.

    Rental dates are not considered: a rental commits its units for as long
    as it is ACTIVE. Raises ``InvalidStateError`` when more units are
    committed than owned.
    """
    committed = 0
    committed_asset_ids = set()
    for rental in _active(active_rentals):
        for item in rental.line_items():
            if item.equipment_id != equipment.id:
                continue
            committed += item.quantity
            committed_asset_ids.update(item.asset_unit_ids)

    total = equipment.quantity or 0
    if committed > total:
        raise InvalidStateError(
            f"Equipment {equipment.id} has {committed} units committed but only {total} owned."
        )
    return AvailabilitySnapshot(equipment, total, committed, committed_asset_ids)


def is_equipment_rented(equipment_id, active_rentals):
    return any(equipment_id in rental.equipment_ids() for rental in _active(active_rentals))


def ensure_can_allocate(snapshot, quantity, asset_unit_ids=()):
    """Reject a reservation that the snapshot cannot satisfy."""
    equipment = snapshot.equipment
    if quantity > snapshot.available:
        raise InsufficientAvailabilityError(
            f"Only {snapshot.available} unit(s) of {equipment.name} available.",
            equipment_id=equipment.id,
            requested=quantity,
            available=snapshot.available,
        )

    if not equipment.is_serialized:
        if asset_unit_ids:
            raise InvalidStateError(f"{equipment.name} is not tracked by asset units.")
        return

    known_ids = {unit.id for unit in equipment.asset_units}
    unknown = [unit_id for unit_id in asset_unit_ids if unit_id not in known_ids]
    if unknown:
        raise InvalidStateError(f"Asset unit(s) {', '.join(unknown)} do not belong to {equipment.name}.")
    if len(set(asset_unit_ids)) != quantity:
        raise InvalidStateError(
            f"Select exactly {quantity} distinct asset unit(s) of {equipment.name}."
        )
    taken = [unit_id for unit_id in asset_unit_ids if unit_id in snapshot.committed_asset_ids]
    if taken:
        raise InsufficientAvailabilityError(
            f"Asset unit(s) {', '.join(taken)} of {equipment.name} are already rented.",
            equipment_id=equipment.id,
            requested=quantity,
            available=snapshot.available,
        )


class AllocationService:
    @staticmethod
    def active_rentals(owner_id):
        require_owner(owner_id)
        return Rental.query.filter_by(owner_id=owner_id, status=RentalStatus.ACTIVE).all()

    @staticmethod
    def availability(owner_id, equipment_id):
        equipment = get_owned(Equipment, owner_id, equipment_id, "Equipment")
        return availability_for(equipment, AllocationService.active_rentals(owner_id))

    @staticmethod
    def is_equipment_rented(owner_id, equipment_id):
        return is_equipment_rented(equipment_id, AllocationService.active_rentals(owner_id))
