import re

from flask import current_app
from sqlalchemy import func, or_

from locadora.errors import AppError, InvalidStateError
from locadora.extensions import db
from locadora.models import Client, Rental
from locadora.services.parsing import parse_flag
from locadora.services.store import get_owned, require_owner


class ClientService:
    @staticmethod
    def _digits(value):
        return "".join(ch for ch in (value or "") if ch.isdigit())

    @staticmethod
    def _normalize_phone(phone):
        digits = ClientService._digits(phone)
        if not re.fullmatch(r"\d{10,11}", digits):
            raise AppError("Phone number must have 10 or 11 digits including area code.", 400)
        return digits

    @staticmethod
    def _normalize_tax_id(tax_id):
        digits = ClientService._digits(tax_id)
        if not digits:
            return None
        if len(digits) not in (11, 14):
            raise AppError("CPF must have 11 digits and CNPJ 14 digits.", 400)
        return digits

    @staticmethod
    def _apply_payload(client, payload, creating):
        if creating or "name" in payload:
            name = (payload.get("name") or "").strip()
            if not name:
                raise AppError("Client name is required.", 400)
            client.name = name
        if creating or "phone" in payload:
            client.phone = ClientService._normalize_phone(payload.get("phone"))
        if creating or "tax_id" in payload:
            client.tax_id = ClientService._normalize_tax_id(payload.get("tax_id"))
        if creating or "email" in payload:
            client.email = (payload.get("email") or "").strip().lower() or None
        if creating or "address" in payload:
            client.address = (payload.get("address") or "").strip() or None
        if creating or "needs_invoice" in payload:
            client.needs_invoice = parse_flag(payload.get("needs_invoice"), "Needs invoice")

    @staticmethod
    def create_client(owner_id, payload):
        require_owner(owner_id)
        client = Client(owner_id=owner_id)
        ClientService._apply_payload(client, payload, creating=True)
        db.session.add(client)
        db.session.commit()
        return client

    @staticmethod
    def update_client(owner_id, client_id, payload):
        client = ClientService.get_client(owner_id, client_id)
        ClientService._apply_payload(client, payload, creating=False)
        db.session.commit()
        return client

    @staticmethod
    def delete_client(owner_id, client_id):
        """Remove a client that no rental refers to, finalized ones included."""
        client = ClientService.get_client(owner_id, client_id)
        if Rental.query.filter_by(owner_id=owner_id, client_id=client.id).first():
            raise InvalidStateError(f"{client.name} has rentals and cannot be deleted.")
        db.session.delete(client)
        db.session.commit()
        current_app.logger.info("Client %s deleted", client_id)

    @staticmethod
    def get_client(owner_id, client_id):
        return get_owned(Client, owner_id, client_id, "Client")

    @staticmethod
    def list_clients(owner_id, query=None):
        """List clients by name; ``query`` matches name, CPF/CNPJ or phone."""
        require_owner(owner_id)
        rows = Client.query.filter_by(owner_id=owner_id)
        term = (query or "").strip().lower()
        if term:
            conditions = [func.lower(Client.name).like(f"%{term}%")]
            digits = ClientService._digits(term)
            if digits:
                conditions.append(Client.tax_id.like(f"%{digits}%"))
                conditions.append(Client.phone.like(f"%{digits}%"))
            rows = rows.filter(or_(*conditions))
        return rows.order_by(Client.name.asc()).all()
