from flask_login import UserMixin

from locadora.extensions import db
from locadora.models.base import IdType, TimestampMixin, TimestampType, new_id


class User(UserMixin, TimestampMixin, db.Model):
    """The business owner. Every catalog, rental and obligation row is scoped to one."""

    __tablename__ = "users"

    id = db.Column(IdType, primary_key=True, default=new_id)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active_user = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(TimestampType, nullable=True)

    clients = db.relationship("Client", back_populates="owner", lazy="dynamic")
    equipment = db.relationship("Equipment", back_populates="owner", lazy="dynamic")
    rentals = db.relationship("Rental", back_populates="owner", lazy="dynamic")
