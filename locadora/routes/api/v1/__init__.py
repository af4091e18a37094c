from flask import Blueprint

from locadora.routes.api.v1.auth import api_auth_bp
from locadora.routes.api.v1.clients import api_client_bp
from locadora.routes.api.v1.equipment import api_equipment_bp
from locadora.routes.api.v1.obligations import api_obligation_bp
from locadora.routes.api.v1.rentals import api_rental_bp

api_v1_bp = Blueprint("api_v1", __name__)
api_v1_bp.register_blueprint(api_auth_bp, url_prefix="/auth")
api_v1_bp.register_blueprint(api_client_bp, url_prefix="/clients")
api_v1_bp.register_blueprint(api_equipment_bp, url_prefix="/equipment")
api_v1_bp.register_blueprint(api_rental_bp, url_prefix="/rentals")
api_v1_bp.register_blueprint(api_obligation_bp, url_prefix="/obligations")
