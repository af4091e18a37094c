"""Session helpers shared by the services."""

from sqlalchemy.orm.exc import StaleDataError

from locadora.errors import ConflictError, NotFoundError, UnauthenticatedError
from locadora.extensions import db


def require_owner(owner_id):
    if not owner_id:
        raise UnauthenticatedError("User not authenticated.")
    return owner_id


def get_owned(model, owner_id, record_id, label):
    require_owner(owner_id)
    record = model.query.filter_by(id=record_id, owner_id=owner_id).first() if record_id else None
    if not record:
        raise NotFoundError(f"{label} not found.")
    return record


def commit():
    # Rentals and obligations are version-checked on flush.
    try:
        db.session.commit()
    except StaleDataError as exc:
        db.session.rollback()
        raise ConflictError("Record was modified concurrently. Reload and try again.") from exc
