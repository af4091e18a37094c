"""JSON shapes shared by the API blueprints."""


def _money(value):
    return str(value) if value is not None else None


def _enum(value):
    return value.value if value is not None else None


def serialize_client(client):
    return {
        "id": client.id,
        "name": client.name,
        "tax_id": client.tax_id,
        "phone": client.phone,
        "email": client.email,
        "address": client.address,
        "needs_invoice": client.needs_invoice,
        "created_at": client.created_at,
    }


def serialize_equipment(equipment):
    return {
        "id": equipment.id,
        "name": equipment.name,
        "category": equipment.category,
        "asset_tag": equipment.asset_tag,
        "purchase_value": _money(equipment.purchase_value),
        "price_daily": _money(equipment.price_daily),
        "price_weekly": _money(equipment.price_weekly),
        "price_fortnightly": _money(equipment.price_fortnightly),
        "price_monthly": _money(equipment.price_monthly),
        "default_price": _money(equipment.default_price),
        "available_periods": [period.value for period in equipment.available_periods()],
        "notes": equipment.notes,
        "quantity": equipment.quantity,
        "asset_units": [
            {"id": unit.id, "code": unit.code, "description": unit.description} for unit in equipment.asset_units
        ],
        "created_at": equipment.created_at,
        "updated_at": equipment.updated_at,
    }


def serialize_rental(rental, deadline=None):
    return {
        "id": rental.id,
        "client_id": rental.client_id,
        "items": [
            {
                "equipment_id": item.equipment_id,
                "quantity": item.quantity,
                "asset_unit_ids": list(item.asset_unit_ids),
            }
            for item in rental.line_items()
        ],
        "price": _money(rental.price),
        "period": _enum(rental.period),
        "payment_moment": _enum(rental.payment_moment),
        "start_at": rental.start_at,
        "end_at": rental.end_at,
        "include_saturday": rental.include_saturday,
        "include_sunday": rental.include_sunday,
        "delivery_status": _enum(rental.delivery_status),
        "delivery_expected_at": rental.delivery_expected_at,
        "delivered_at": rental.delivered_at,
        "payment_status": _enum(rental.payment_status),
        "paid_at": rental.paid_at,
        "pickup_status": _enum(rental.pickup_status),
        "collected_at": rental.collected_at,
        "invoice_requested": rental.invoice_requested,
        "invoice_issued": rental.invoice_issued,
        "status": _enum(rental.status),
        "deadline": _enum(deadline),
        "renewal_count": rental.renewal_count,
        "last_renewed_at": rental.last_renewed_at,
        "notes": rental.notes,
        "created_at": rental.created_at,
        "updated_at": rental.updated_at,
    }


def serialize_obligation(obligation):
    return {
        "id": obligation.id,
        "rental_id": obligation.rental_id,
        "client_id": obligation.client_id,
        "equipment_ids": obligation.equipment_ids(),
        "items": obligation.items,
        "amount": _money(obligation.amount),
        "due_at": obligation.due_at,
        "status": _enum(obligation.status),
        "paid_at": obligation.paid_at,
        "sequence": obligation.sequence,
        "created_at": obligation.created_at,
    }


def serialize_revenue(report):
    return {
        "equipment_id": report.equipment.id,
        "month": report.month,
        "months": report.months(),
        "purchase_value": _money(report.purchase_value),
        "revenue_total": _money(report.revenue_total),
        "profit_total": _money(report.profit_total),
        "revenue": _money(report.revenue),
        "rentals": [
            {
                "rental_id": rental.id,
                "client_id": rental.client_id,
                "client_name": rental.client.name if rental.client else None,
                "price": _money(rental.price),
                "paid_at": rental.paid_at,
                "end_at": rental.end_at,
            }
            for rental in report.selected_rentals()
        ],
    }
