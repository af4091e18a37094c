from locadora.models.client import Client
from locadora.models.enums import (
    DeadlineStatus,
    DeliveryStatus,
    PaymentMoment,
    PaymentStatus,
    PickupStatus,
    RentalPeriod,
    RentalStatus,
)
from locadora.models.equipment import AssetUnit, Equipment
from locadora.models.obligation import PaymentObligation
from locadora.models.rental import LineItem, Rental, RentalItem
from locadora.models.user import User

__all__ = [
    "User",
    "Client",
    "Equipment",
    "AssetUnit",
    "Rental",
    "RentalItem",
    "LineItem",
    "PaymentObligation",
    "DeliveryStatus",
    "PaymentStatus",
    "PickupStatus",
    "RentalStatus",
    "DeadlineStatus",
    "PaymentMoment",
    "RentalPeriod",
]
