from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

PLACEHOLDER = "—"


def format_money(value: Decimal | int | float | None) -> str:
    """Render an amount as Brazilian reais, e.g. ``R$ 1.234,56``."""
    if value is None:
        return PLACEHOLDER
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {localized}"
