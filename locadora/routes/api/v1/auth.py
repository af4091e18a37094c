from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, login_user, logout_user

from locadora.extensions import limiter
from locadora.services import AuthService

api_auth_bp = Blueprint("api_auth", __name__)


@api_auth_bp.post("/register")
def api_register():
    payload = request.get_json(silent=True) or {}
    user = AuthService.register_user(
        full_name=payload.get("full_name", ""),
        email=payload.get("email", ""),
        password=payload.get("password", ""),
    )
    login_user(user)
    return jsonify({"id": user.id, "email": user.email, "full_name": user.full_name}), 201


@api_auth_bp.post("/login")
@limiter.limit(lambda: current_app.config["RATELIMIT_LOGIN"])
def api_login():
    payload = request.get_json(silent=True) or {}
    user = AuthService.authenticate_user(payload.get("email", ""), payload.get("password", ""))
    login_user(user)
    return jsonify({"id": user.id, "email": user.email, "full_name": user.full_name})


@api_auth_bp.post("/logout")
@login_required
def api_logout():
    logout_user()
    return jsonify({"ok": True})
