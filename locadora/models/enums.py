import enum

from locadora.extensions import db


class DeliveryStatus(str, enum.Enum):
    NOT_SCHEDULED = "NOT_SCHEDULED"
    SCHEDULED = "SCHEDULED"
    DELIVERED = "DELIVERED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class PickupStatus(str, enum.Enum):
    NOT_COLLECTED = "NOT_COLLECTED"
    COLLECTED = "COLLECTED"


class RentalStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    FINALIZED = "FINALIZED"


class DeadlineStatus(str, enum.Enum):
    NORMAL = "NORMAL"
    DUE_SOON = "DUE_SOON"
    OVERDUE = "OVERDUE"


class PaymentMoment(str, enum.Enum):
    AT_START = "AT_START"
    AT_DUE_DATE = "AT_DUE_DATE"


class RentalPeriod(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    FORTNIGHTLY = "FORTNIGHTLY"
    MONTHLY = "MONTHLY"

    @property
    def days(self):
        return PERIOD_DAYS[self]


PERIOD_DAYS = {
    RentalPeriod.DAILY: 1,
    RentalPeriod.WEEKLY: 7,
    RentalPeriod.FORTNIGHTLY: 15,
    RentalPeriod.MONTHLY: 30,
}


def enum_column(enum_cls, **kwargs):
    return db.Column(db.Enum(enum_cls, native_enum=False, length=24), **kwargs)
