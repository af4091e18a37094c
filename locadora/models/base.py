import uuid

from locadora import clock
from locadora.extensions import db

# Opaque string ids assigned on insert.
IdType = db.String(32)

# Milliseconds since the epoch.
TimestampType = db.BigInteger


def new_id():
    return uuid.uuid4().hex


class TimestampMixin:
    created_at = db.Column(TimestampType, nullable=False, default=lambda: clock.now_ms())
    updated_at = db.Column(
        TimestampType,
        nullable=False,
        default=lambda: clock.now_ms(),
        onupdate=lambda: clock.now_ms(),
    )
