from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from flask import current_app
from sqlalchemy import func, or_

from locadora.errors import AppError, InvalidStateError
from locadora.extensions import db
from locadora.models import AssetUnit, Equipment, PaymentStatus, Rental
from locadora.models.equipment import PERIOD_PRICE_FIELDS
from locadora.services.allocation_service import AllocationService
from locadora.services.parsing import require_mapping
from locadora.services.store import get_owned, require_owner


def month_of(ms):
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%Y-%m")


def _booked_at(rental):
    # Rentals without a payment timestamp are dated by their term end.
    return rental.paid_at if rental.paid_at is not None else rental.end_at


class RevenueReport:
    """Paid rentals of one equipment, with revenue and profit over its purchase value."""

    def __init__(self, equipment, paid_rentals, month=None):
        self.equipment = equipment
        self.rentals = sorted(paid_rentals, key=_booked_at, reverse=True)
        self.month = month

    @staticmethod
    def _sum(rentals):
        return sum((Decimal(str(rental.price)) for rental in rentals), Decimal("0.00"))

    @property
    def purchase_value(self):
        return Decimal(str(self.equipment.purchase_value or 0)).quantize(Decimal("0.01"))

    @property
    def revenue_total(self):
        return self._sum(self.rentals)

    @property
    def profit_total(self):
        return self.revenue_total - self.purchase_value

    def months(self):
        return sorted({month_of(_booked_at(rental)) for rental in self.rentals}, reverse=True)

    def selected_rentals(self):
        if self.month is None:
            return list(self.rentals)
        return [rental for rental in self.rentals if month_of(_booked_at(rental)) == self.month]

    @property
    def revenue(self):
        return self._sum(self.selected_rentals())


class EquipmentService:
    @staticmethod
    def _parse_money(value, label):
        if value is None or value == "":
            return None
        try:
            amount = Decimal(str(value)).quantize(Decimal("0.01"))
        except (InvalidOperation, ValueError) as exc:
            raise AppError(f"Invalid {label}.", 400) from exc
        if amount < 0:
            raise AppError(f"{label.capitalize()} cannot be negative.", 400)
        return amount

    @staticmethod
    def _parse_asset_units(raw_units):
        units = []
        codes = set()
        for raw in raw_units or []:
            if isinstance(raw, str):
                raw = {"code": raw}
            raw = require_mapping(raw, "asset unit")
            code = (raw.get("code") or "").strip()
            if not code:
                raise AppError("Asset unit code is required.", 400)
            if code in codes:
                raise AppError(f"Asset unit {code} is listed more than once.", 400)
            codes.add(code)
            units.append((code, (raw.get("description") or "").strip() or None))
        return units

    @staticmethod
    def _apply_units(equipment, units):
        # Keep the ids of units whose code survives so reservations stay valid.
        existing = {unit.code: unit for unit in equipment.asset_units}
        rebuilt = []
        for position, (code, description) in enumerate(units):
            unit = existing.get(code) or AssetUnit(code=code)
            unit.description = description
            unit.position = position
            rebuilt.append(unit)
        equipment.asset_units = rebuilt

    @staticmethod
    def _apply_payload(equipment, payload, creating):
        if creating or "name" in payload:
            name = (payload.get("name") or "").strip()
            if not name:
                raise AppError("Equipment name is required.", 400)
            equipment.name = name
        if creating or "category" in payload:
            equipment.category = (payload.get("category") or "").strip()
        if creating or "asset_tag" in payload:
            equipment.asset_tag = (payload.get("asset_tag") or "").strip() or None
        if creating or "notes" in payload:
            equipment.notes = (payload.get("notes") or "").strip() or None
        if creating or "purchase_value" in payload:
            equipment.purchase_value = EquipmentService._parse_money(payload.get("purchase_value"), "purchase value")
        for field in PERIOD_PRICE_FIELDS.values():
            if creating or field in payload:
                setattr(equipment, field, EquipmentService._parse_money(payload.get(field), field.replace("_", " ")))

        if not equipment.available_periods():
            raise AppError("Provide a price for at least one rental period.", 400)

        if creating or "asset_units" in payload:
            EquipmentService._apply_units(equipment, EquipmentService._parse_asset_units(payload.get("asset_units")))

        if equipment.asset_units:
            equipment.quantity = len(equipment.asset_units)
        elif creating or "quantity" in payload:
            try:
                quantity = int(payload.get("quantity") or 1)
            except (TypeError, ValueError) as exc:
                raise AppError("Quantity must be a positive integer.", 400) from exc
            if quantity <= 0:
                raise AppError("Quantity must be a positive integer.", 400)
            equipment.quantity = quantity

    @staticmethod
    def _ensure_not_rented(owner_id, equipment):
        if AllocationService.is_equipment_rented(owner_id, equipment.id):
            raise InvalidStateError(f"{equipment.name} is in an active rental and cannot be changed.")

    @staticmethod
    def create_equipment(owner_id, payload):
        require_owner(owner_id)
        equipment = Equipment(owner_id=owner_id)
        EquipmentService._apply_payload(equipment, payload, creating=True)
        db.session.add(equipment)
        db.session.commit()
        current_app.logger.info("Equipment %s created with %s unit(s)", equipment.id, equipment.quantity)
        return equipment

    @staticmethod
    def update_equipment(owner_id, equipment_id, payload):
        equipment = EquipmentService.get_equipment(owner_id, equipment_id)
        EquipmentService._ensure_not_rented(owner_id, equipment)
        EquipmentService._apply_payload(equipment, payload, creating=False)
        db.session.commit()
        return equipment

    @staticmethod
    def delete_equipment(owner_id, equipment_id):
        equipment = EquipmentService.get_equipment(owner_id, equipment_id)
        EquipmentService._ensure_not_rented(owner_id, equipment)
        db.session.delete(equipment)
        db.session.commit()
        current_app.logger.info("Equipment %s deleted", equipment_id)

    @staticmethod
    def get_equipment(owner_id, equipment_id):
        return get_owned(Equipment, owner_id, equipment_id, "Equipment")

    @staticmethod
    def list_equipment(owner_id, query=None):
        require_owner(owner_id)
        rows = Equipment.query.filter_by(owner_id=owner_id)
        term = (query or "").strip().lower()
        if term:
            pattern = f"%{term}%"
            rows = rows.filter(
                or_(
                    func.lower(Equipment.name).like(pattern),
                    func.lower(Equipment.category).like(pattern),
                    func.lower(Equipment.asset_tag).like(pattern),
                )
            )
        return rows.order_by(Equipment.created_at.desc()).all()

    @staticmethod
    def _parse_month(month):
        if month in (None, ""):
            return None
        try:
            return datetime.strptime(str(month).strip(), "%Y-%m").strftime("%Y-%m")
        except ValueError as exc:
            raise AppError("Month must use the YYYY-MM format.", 400) from exc

    @staticmethod
    def revenue(owner_id, equipment_id, month=None):
        """Revenue of the paid rentals that include ``equipment_id``.

        Each rental counts with its full agreed price. ``month`` (``YYYY-MM``,
        UTC) narrows ``revenue`` and the listed rentals; totals and profit
        always cover every paid rental.
        """
        equipment = EquipmentService.get_equipment(owner_id, equipment_id)
        month = EquipmentService._parse_month(month)
        paid = Rental.query.filter_by(owner_id=owner_id, payment_status=PaymentStatus.PAID).all()
        return RevenueReport(equipment, [rental for rental in paid if equipment.id in rental.equipment_ids()], month)
