from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from numbers import Number

from .errors import InvalidDelta, ValidationError

_MAX_QUANTITY = 2**31 - 1


def parse_price(value: object) -> Decimal | None:
    """Parse an optional, non-negative price.

    Empty input means "no price". Strings may use a comma as the decimal
    separator.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(message="Invalid price.", field="price")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        text = text.replace(",", ".")
    elif isinstance(value, (Decimal, Number)):
        text = str(value)
    else:
        raise ValidationError(message="Invalid price.", field="price")
    try:
        price = Decimal(text)
    except InvalidOperation as exc:
        raise ValidationError(message="Invalid price.", field="price") from exc
    if not price.is_finite() or price < 0:
        raise ValidationError(message="Invalid price.", field="price")
    return price


def parse_item_input(name: object, price: object) -> tuple[str, Decimal | None]:
    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        raise ValidationError(message="Item name is required.", field="name")
    return cleaned, parse_price(price)


def coerce_delta(delta: object) -> int:
    """Accept only nonzero integers; integral floats from numeric inputs are fine."""
    if isinstance(delta, bool):
        raise InvalidDelta(message="Quantity must be a nonzero integer.", field="qty")
    if isinstance(delta, int):
        value = delta
    elif isinstance(delta, float) and math.isfinite(delta) and delta.is_integer():
        value = int(delta)
    elif isinstance(delta, Decimal) and delta.is_finite() and delta == delta.to_integral_value():
        value = int(delta)
    else:
        raise InvalidDelta(message="Quantity must be a nonzero integer.", field="qty")
    if value == 0:
        raise InvalidDelta(message="Quantity must be a nonzero integer.", field="qty")
    return value


def normalize_note(note: str | None) -> str | None:
    if note is None:
        return None
    trimmed = note.strip()
    return trimmed or None


def floor_quantity(requested: object) -> int:
    """Floor a requested cart quantity and clamp it to at least 1."""
    if isinstance(requested, bool) or not isinstance(requested, (int, float, Decimal, str)):
        raise ValidationError(message="Quantity must be a number.", field="qty")
    try:
        value = Decimal(str(requested).strip())
    except InvalidOperation as exc:
        raise ValidationError(message="Quantity must be a number.", field="qty") from exc
    if value.is_nan():
        raise ValidationError(message="Quantity must be a number.", field="qty")
    if value.is_infinite():
        return 1 if value < 0 else _MAX_QUANTITY
    return max(1, int(math.floor(value)))


def clamp_price(requested: object) -> Decimal:
    """Clamp a sale-time price override to at least 0."""
    if isinstance(requested, bool) or not isinstance(requested, (int, float, Decimal, str)):
        raise ValidationError(message="Invalid price.", field="price")
    try:
        value = Decimal(str(requested).strip().replace(",", "."))
    except InvalidOperation as exc:
        raise ValidationError(message="Invalid price.", field="price") from exc
    if not value.is_finite():
        raise ValidationError(message="Invalid price.", field="price")
    return max(Decimal("0"), value)

