from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from locadora.routes.api.v1.serializers import serialize_equipment, serialize_revenue
from locadora.services import AllocationService, EquipmentService

api_equipment_bp = Blueprint("api_equipment", __name__)


@api_equipment_bp.get("")
@login_required
def list_equipment():
    rows = EquipmentService.list_equipment(current_user.id, request.args.get("q"))
    return jsonify([serialize_equipment(e) for e in rows])


@api_equipment_bp.post("")
@login_required
def create_equipment():
    payload = request.get_json(silent=True) or {}
    equipment = EquipmentService.create_equipment(current_user.id, payload)
    return jsonify(serialize_equipment(equipment)), 201


@api_equipment_bp.get("/<equipment_id>")
@login_required
def get_equipment(equipment_id):
    return jsonify(serialize_equipment(EquipmentService.get_equipment(current_user.id, equipment_id)))


@api_equipment_bp.patch("/<equipment_id>")
@login_required
def update_equipment(equipment_id):
    payload = request.get_json(silent=True) or {}
    equipment = EquipmentService.update_equipment(current_user.id, equipment_id, payload)
    return jsonify(serialize_equipment(equipment))


@api_equipment_bp.delete("/<equipment_id>")
@login_required
def delete_equipment(equipment_id):
    EquipmentService.delete_equipment(current_user.id, equipment_id)
    return jsonify({"ok": True})


@api_equipment_bp.get("/<equipment_id>/availability")
@login_required
def equipment_availability(equipment_id):
    snapshot = AllocationService.availability(current_user.id, equipment_id)
    return jsonify(snapshot.to_dict())


@api_equipment_bp.get("/<equipment_id>/revenue")
@login_required
def equipment_revenue(equipment_id):
    report = EquipmentService.revenue(current_user.id, equipment_id, request.args.get("month"))
    return jsonify(serialize_revenue(report))
