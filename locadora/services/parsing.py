"""Payload field parsers shared by the services. Every failure is an ``AppError`` 400."""

from decimal import Decimal, InvalidOperation

from locadora.errors import AppError

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"", "0", "false", "no", "off"}


def parse_timestamp(value, label, required=True):
    if value is None or value == "":
        if required:
            raise AppError(f"{label} is required.", 400)
        return None
    if isinstance(value, bool):
        raise AppError(f"{label} must be a timestamp in milliseconds.", 400)
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise AppError(f"{label} must be a timestamp in milliseconds.", 400) from exc
    if parsed < 0:
        raise AppError(f"{label} must be a timestamp in milliseconds.", 400)
    return parsed


def parse_price(value, label="Price"):
    try:
        price = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError) as exc:
        raise AppError(f"{label} must be a number.", 400) from exc
    if price <= 0:
        raise AppError(f"{label} must be a positive number.", 400)
    return price


def parse_enum(enum_cls, value, label, default=None):
    if value is None or value == "":
        return default
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError as exc:
        raise AppError(f"Invalid {label}.", 400) from exc


def parse_flag(value, label, default=False):
    """Read a JSON boolean, also accepting the usual string and 0/1 spellings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
    raise AppError(f"{label} must be true or false.", 400)


def require_mapping(value, label):
    if not isinstance(value, dict):
        raise AppError(f"Each {label} must be an object.", 400)
    return value
