from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round_money(amount) -> float:
    """Round to cents, half-up (7.345 -> 7.35), returning a float for storage."""
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def to_cents(amount) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
