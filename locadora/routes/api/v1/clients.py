from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from locadora.routes.api.v1.serializers import serialize_client
from locadora.services import ClientService

api_client_bp = Blueprint("api_client", __name__)


@api_client_bp.get("")
@login_required
def list_clients():
    rows = ClientService.list_clients(current_user.id, request.args.get("q"))
    return jsonify([serialize_client(c) for c in rows])


@api_client_bp.post("")
@login_required
def create_client():
    payload = request.get_json(silent=True) or {}
    client = ClientService.create_client(current_user.id, payload)
    return jsonify(serialize_client(client)), 201


@api_client_bp.get("/<client_id>")
@login_required
def get_client(client_id):
    return jsonify(serialize_client(ClientService.get_client(current_user.id, client_id)))


@api_client_bp.patch("/<client_id>")
@login_required
def update_client(client_id):
    payload = request.get_json(silent=True) or {}
    return jsonify(serialize_client(ClientService.update_client(current_user.id, client_id, payload)))


@api_client_bp.delete("/<client_id>")
@login_required
def delete_client(client_id):
    ClientService.delete_client(current_user.id, client_id)
    return jsonify({"ok": True})
