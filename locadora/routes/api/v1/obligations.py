from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from locadora.routes.api.v1.serializers import serialize_obligation
from locadora.services import ObligationService

api_obligation_bp = Blueprint("api_obligation", __name__)


@api_obligation_bp.get("/pending")
@login_required
def pending():
    return jsonify([serialize_obligation(o) for o in ObligationService.list_pending(current_user.id)])


@api_obligation_bp.get("/paid")
@login_required
def paid():
    return jsonify([serialize_obligation(o) for o in ObligationService.list_paid(current_user.id)])


@api_obligation_bp.get("/overdue")
@login_required
def overdue():
    return jsonify([serialize_obligation(o) for o in ObligationService.list_overdue(current_user.id)])


@api_obligation_bp.get("/receivable")
@login_required
def receivable():
    return jsonify([serialize_obligation(o) for o in ObligationService.list_receivable(current_user.id)])


@api_obligation_bp.get("/totals")
@login_required
def totals():
    result = ObligationService.totals(current_user.id)
    return jsonify({"pending": str(result["pending"]), "paid": str(result["paid"])})


@api_obligation_bp.post("/<obligation_id>/pay")
@login_required
def mark_paid(obligation_id):
    obligation = ObligationService.mark_paid(current_user.id, obligation_id)
    return jsonify(serialize_obligation(obligation))


@api_obligation_bp.delete("/<obligation_id>")
@login_required
def delete_obligation(obligation_id):
    ObligationService.delete(current_user.id, obligation_id)
    return jsonify({"ok": True})
