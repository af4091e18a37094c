from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from locadora import clock
from locadora.errors import AppError
from locadora.extensions import db
from locadora.models import (
    Client,
    DeliveryStatus,
    Equipment,
    PaymentMoment,
    Rental,
    RentalItem,
    RentalPeriod,
    RentalStatus,
)
from locadora.services import lifecycle
from locadora.services.allocation_service import AllocationService, availability_for, ensure_can_allocate
from locadora.services.obligation_service import ObligationService
from locadora.services.parsing import parse_enum, parse_flag, parse_price, parse_timestamp, require_mapping
from locadora.services.pricing import common_periods, end_date_for, quote_price
from locadora.services.store import commit, get_owned, require_owner

EDITABLE_TIMESTAMPS = ("start_at", "end_at", "delivery_expected_at")
EDITABLE_FLAGS = ("include_saturday", "include_sunday", "invoice_requested")


class RentalService:
    @staticmethod
    def _parse_items(owner_id, raw_items):
        if not raw_items:
            raise AppError("Select at least one equipment.", 400)
        if not isinstance(raw_items, list):
            raise AppError("Items must be a list.", 400)

        parsed = []
        seen = set()
        for raw in raw_items:
            raw = require_mapping(raw, "item")
            equipment = get_owned(Equipment, owner_id, raw.get("equipment_id"), "Equipment")
            if equipment.id in seen:
                raise AppError(f"{equipment.name} is listed more than once.", 400)
            seen.add(equipment.id)

            raw_unit_ids = raw.get("asset_unit_ids") or []
            if not isinstance(raw_unit_ids, list):
                raise AppError("Asset unit ids must be a list.", 400)
            asset_unit_ids = [str(unit_id) for unit_id in raw_unit_ids]
            default_quantity = len(asset_unit_ids) or 1
            try:
                quantity = int(raw.get("quantity") or default_quantity)
            except (TypeError, ValueError) as exc:
                raise AppError("Quantity must be a positive integer.", 400) from exc
            if quantity <= 0:
                raise AppError("Quantity must be a positive integer.", 400)
            parsed.append((equipment, quantity, asset_unit_ids))
        return parsed

    @staticmethod
    def _ensure_common_period(parsed_items, period):
        if period not in common_periods([equipment for equipment, _, _ in parsed_items]):
            raise AppError(f"Not every selected equipment has a {period.value.lower()} price.", 400)

    @staticmethod
    def _reserve(parsed_items, active_rentals):
        """Check every item against current availability and pick asset units when none were chosen."""
        reserved = []
        for equipment, quantity, asset_unit_ids in parsed_items:
            snapshot = availability_for(equipment, active_rentals)
            if equipment.is_serialized and not asset_unit_ids:
                asset_unit_ids = [unit.id for unit in snapshot.available_asset_units()[:quantity]]
            ensure_can_allocate(snapshot, quantity, asset_unit_ids)
            reserved.append((equipment, quantity, asset_unit_ids))
        return reserved

    @staticmethod
    def create_rental(owner_id, payload):
        require_owner(owner_id)
        client = get_owned(Client, owner_id, payload.get("client_id"), "Client")
        parsed_items = RentalService._parse_items(owner_id, payload.get("items"))

        period = parse_enum(RentalPeriod, payload.get("period"), "rental period", RentalPeriod.DAILY)
        payment_moment = parse_enum(
            PaymentMoment, payload.get("payment_moment"), "payment moment", PaymentMoment.AT_DUE_DATE
        )
        RentalService._ensure_common_period(parsed_items, period)

        now = clock.now_ms()
        start_at = parse_timestamp(payload.get("start_at"), "Start date", required=False)
        if start_at is None:
            start_at = now
        end_at = parse_timestamp(payload.get("end_at"), "End date", required=False)
        if end_at is None:
            end_at = end_date_for(start_at, period)
        # The first obligation falls due on the chosen payment date, else at the end of the term.
        payment_due_at = parse_timestamp(payload.get("payment_due_at"), "Payment due date", required=False)
        if payment_due_at is None:
            payment_due_at = end_at
        include_saturday = parse_flag(payload.get("include_saturday"), "Include saturday")
        include_sunday = parse_flag(payload.get("include_sunday"), "Include sunday")

        delivery_status = parse_enum(
            DeliveryStatus, payload.get("delivery_status"), "delivery status", DeliveryStatus.NOT_SCHEDULED
        )
        delivery_expected_at = None
        if delivery_status == DeliveryStatus.SCHEDULED:
            delivery_expected_at = parse_timestamp(payload.get("delivery_expected_at"), "Expected delivery date")

        if payload.get("price") in (None, ""):
            price = quote_price(
                [(equipment, quantity) for equipment, quantity, _ in parsed_items],
                period,
                start_at,
                end_at,
                include_saturday,
                include_sunday,
            )
            if price <= 0:
                raise AppError("Rental price must be a positive number.", 400)
        else:
            price = parse_price(payload.get("price"), "Rental price")

        reserved = RentalService._reserve(parsed_items, AllocationService.active_rentals(owner_id))

        invoice_requested = parse_flag(payload.get("invoice_requested"), "Invoice requested", client.needs_invoice)

        rental = Rental(
            owner_id=owner_id,
            client_id=client.id,
            price=price,
            period=period,
            payment_moment=payment_moment,
            start_at=start_at,
            end_at=end_at,
            include_saturday=include_saturday,
            include_sunday=include_sunday,
            delivery_status=delivery_status,
            delivery_expected_at=delivery_expected_at,
            delivered_at=now if delivery_status == DeliveryStatus.DELIVERED else None,
            invoice_requested=invoice_requested,
            notes=(payload.get("notes") or "").strip() or None,
            status=RentalStatus.ACTIVE,
            renewal_count=0,
            created_at=now,
            updated_at=now,
        )
        for position, (equipment, quantity, asset_unit_ids) in enumerate(reserved):
            rental.items.append(
                RentalItem(
                    equipment_id=equipment.id,
                    quantity=quantity,
                    asset_unit_ids=list(asset_unit_ids),
                    position=position,
                )
            )
        db.session.add(rental)
        db.session.flush()
        ObligationService.create_for_rental(rental, sequence=0, due_at=payment_due_at)
        commit()
        current_app.logger.info("Rental %s booked for client %s (%s item(s))", rental.id, client.id, len(reserved))
        return rental

    @staticmethod
    def get_rental(owner_id, rental_id):
        return get_owned(Rental, owner_id, rental_id, "Rental")

    @staticmethod
    def list_rentals(owner_id, status=None):
        require_owner(owner_id)
        query = Rental.query.filter_by(owner_id=owner_id)
        status = parse_enum(RentalStatus, status, "rental status")
        if status == RentalStatus.ACTIVE:
            query = query.filter_by(status=status).order_by(Rental.end_at.asc())
        elif status == RentalStatus.FINALIZED:
            query = query.filter_by(status=status).order_by(Rental.created_at.desc())
        else:
            query = query.order_by(Rental.created_at.desc())
        try:
            return query.all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.warning("Could not load rentals: %s", exc)
            return []

    @staticmethod
    def update_rental(owner_id, rental_id, payload):
        """Edit the descriptive fields of a rental. Status tracks have their own operations."""
        rental = RentalService.get_rental(owner_id, rental_id)
        if "client_id" in payload:
            rental.client_id = get_owned(Client, owner_id, payload.get("client_id"), "Client").id
        if "price" in payload:
            rental.price = parse_price(payload.get("price"), "Rental price")
        if "period" in payload:
            rental.period = parse_enum(RentalPeriod, payload.get("period"), "rental period", rental.period)
        if "payment_moment" in payload:
            rental.payment_moment = parse_enum(
                PaymentMoment, payload.get("payment_moment"), "payment moment", rental.payment_moment
            )
        for field in EDITABLE_TIMESTAMPS:
            if field in payload:
                required = field != "delivery_expected_at"
                setattr(rental, field, parse_timestamp(payload.get(field), field.replace("_", " "), required))
        for field in EDITABLE_FLAGS:
            if field in payload:
                setattr(rental, field, parse_flag(payload.get(field), field.replace("_", " ").capitalize()))
        if "notes" in payload:
            rental.notes = (payload.get("notes") or "").strip() or None

        rental.updated_at = clock.now_ms()
        lifecycle.refresh_status(rental)
        commit()
        return rental

    @staticmethod
    def delete_rental(owner_id, rental_id):
        rental = RentalService.get_rental(owner_id, rental_id)
        removed = ObligationService.delete_for_rental(owner_id, rental.id)
        db.session.delete(rental)
        commit()
        current_app.logger.info("Rental %s deleted with %s obligation(s)", rental_id, removed)

    @staticmethod
    def schedule_delivery(owner_id, rental_id, when):
        rental = RentalService.get_rental(owner_id, rental_id)
        lifecycle.schedule_delivery(rental, parse_timestamp(when, "Expected delivery date"), clock.now_ms())
        commit()
        return rental

    @staticmethod
    def confirm_delivery(owner_id, rental_id):
        rental = RentalService.get_rental(owner_id, rental_id)
        lifecycle.confirm_delivery(rental, clock.now_ms())
        commit()
        return rental

    @staticmethod
    def confirm_payment(owner_id, rental_id):
        rental = RentalService.get_rental(owner_id, rental_id)
        lifecycle.confirm_payment(rental, clock.now_ms())
        commit()
        current_app.logger.info("Rental %s payment confirmed (status %s)", rental.id, rental.status.value)
        return rental

    @staticmethod
    def confirm_pickup(owner_id, rental_id):
        rental = RentalService.get_rental(owner_id, rental_id)
        lifecycle.confirm_pickup(rental, clock.now_ms())
        commit()
        current_app.logger.info("Rental %s pickup confirmed (status %s)", rental.id, rental.status.value)
        return rental

    @staticmethod
    def mark_invoice_issued(owner_id, rental_id):
        rental = RentalService.get_rental(owner_id, rental_id)
        lifecycle.mark_invoice_issued(rental, clock.now_ms())
        commit()
        return rental

    @staticmethod
    def deadline_status(rental, now=None):
        now = clock.now_ms() if now is None else now
        return lifecycle.deadline_status(rental, now, current_app.config.get("DUE_SOON_DAYS", 2))
