from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from locadora.routes.api.v1.serializers import serialize_obligation, serialize_rental
from locadora.services import ObligationService, RenewalService, RentalService

api_rental_bp = Blueprint("api_rental", __name__)


def _rental_response(rental, status_code=200):
    return jsonify(serialize_rental(rental, RentalService.deadline_status(rental))), status_code


@api_rental_bp.get("")
@login_required
def list_rentals():
    rentals = RentalService.list_rentals(current_user.id, request.args.get("status"))
    return jsonify([serialize_rental(r, RentalService.deadline_status(r)) for r in rentals])


@api_rental_bp.post("")
@login_required
def create_rental():
    payload = request.get_json(silent=True) or {}
    rental = RentalService.create_rental(current_user.id, payload)
    return _rental_response(rental, 201)


@api_rental_bp.get("/<rental_id>")
@login_required
def get_rental(rental_id):
    return _rental_response(RentalService.get_rental(current_user.id, rental_id))


@api_rental_bp.patch("/<rental_id>")
@login_required
def update_rental(rental_id):
    payload = request.get_json(silent=True) or {}
    return _rental_response(RentalService.update_rental(current_user.id, rental_id, payload))


@api_rental_bp.delete("/<rental_id>")
@login_required
def delete_rental(rental_id):
    RentalService.delete_rental(current_user.id, rental_id)
    return jsonify({"ok": True})


@api_rental_bp.post("/<rental_id>/delivery/schedule")
@login_required
def schedule_delivery(rental_id):
    payload = request.get_json(silent=True) or {}
    rental = RentalService.schedule_delivery(current_user.id, rental_id, payload.get("when"))
    return _rental_response(rental)


@api_rental_bp.post("/<rental_id>/delivery/confirm")
@login_required
def confirm_delivery(rental_id):
    return _rental_response(RentalService.confirm_delivery(current_user.id, rental_id))


@api_rental_bp.post("/<rental_id>/payment/confirm")
@login_required
def confirm_payment(rental_id):
    return _rental_response(RentalService.confirm_payment(current_user.id, rental_id))


@api_rental_bp.post("/<rental_id>/pickup/confirm")
@login_required
def confirm_pickup(rental_id):
    return _rental_response(RentalService.confirm_pickup(current_user.id, rental_id))


@api_rental_bp.post("/<rental_id>/invoice/issued")
@login_required
def mark_invoice_issued(rental_id):
    return _rental_response(RentalService.mark_invoice_issued(current_user.id, rental_id))


@api_rental_bp.post("/<rental_id>/renew")
@login_required
def renew_rental(rental_id):
    payload = request.get_json(silent=True) or {}
    rental, obligation_id = RenewalService.renew(
        current_user.id,
        rental_id,
        payload.get("end_at"),
        payload.get("price"),
    )
    body = serialize_rental(rental, RentalService.deadline_status(rental))
    body["obligation_id"] = obligation_id
    return jsonify(body)


@api_rental_bp.get("/<rental_id>/obligations")
@login_required
def rental_obligations(rental_id):
    rental = RentalService.get_rental(current_user.id, rental_id)
    rows = ObligationService.list_for_rental(current_user.id, rental.id)
    return jsonify([serialize_obligation(o) for o in rows])
