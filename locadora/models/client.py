from locadora.extensions import db
from locadora.models.base import IdType, TimestampMixin, new_id


class Client(TimestampMixin, db.Model):
    __tablename__ = "clients"

    id = db.Column(IdType, primary_key=True, default=new_id)
    owner_id = db.Column(IdType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(160), nullable=False, index=True)
    tax_id = db.Column(db.String(14), nullable=True)  # CPF or CNPJ digits
    phone = db.Column(db.String(11), nullable=False, default="")
    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.Text, nullable=True)
    needs_invoice = db.Column(db.Boolean, nullable=False, default=False)

    owner = db.relationship("User", back_populates="clients")
    rentals = db.relationship("Rental", back_populates="client", lazy="dynamic")
