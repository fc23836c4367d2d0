"""
Numeric helpers shared by pipeline stages.

Rounding is half away from zero on the shortest decimal representation of
the float, so the same inputs always produce the same published values.
"""

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

MATERIALITY_TOLERANCE = 0.000001


def round_half_away(value: float, places: int) -> float:
    """Round ``value`` to ``places`` decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round6(value: float) -> float:
    return round_half_away(value, 6)


def round4(value: float) -> float:
    return round_half_away(value, 4)


def truncate6(value: float) -> float:
    """Round to 6 decimals toward zero, so |result| never exceeds |value|."""
    return float(Decimal(repr(float(value))).quantize(Decimal("0.000001"), rounding=ROUND_DOWN))


def clamp(value: float, lower: float, upper: float) -> float:
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def is_material(delta: float) -> bool:
    """True when a weight change is large enough to act on."""
    return abs(delta) > MATERIALITY_TOLERANCE
