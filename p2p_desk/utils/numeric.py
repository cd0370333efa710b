"""
NUMERIC GUARD
Parse user-entered decimal text for arithmetic

RULES:
❌ Never raise on bad input
❌ Never rewrite the caller's text
✅ Unparseable / empty / non-finite / out-of-range -> 0 for arithmetic
✅ Decimal end to end (no float drift)
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")

# Largest accepted |exponent|; products and quotients of a few such
# operands stay inside the default context and the float range
MAX_EXPONENT = 100

NumericInput = Union[str, int, float, Decimal, None]


def try_parse_decimal(value: NumericInput) -> Optional[Decimal]:
    """
    Parse a value into a finite Decimal.

    Returns None for empty, unparseable or non-finite input (NaN, Infinity)
    and for magnitudes beyond 1e±MAX_EXPONENT, which would overflow the
    calculator's arithmetic.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None

    if not parsed.is_finite():
        return None
    if parsed and abs(parsed.adjusted()) > MAX_EXPONENT:
        return None
    return parsed


def parse_decimal(value: NumericInput) -> Decimal:
    """Parse for arithmetic: anything invalid counts as zero."""
    parsed = try_parse_decimal(value)
    return parsed if parsed is not None else ZERO


def format_fixed2(value: Decimal) -> str:
    """Fixed two-decimal text, half-up ("18.005" -> "18.01")."""
    try:
        return str(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Beyond context precision; keep the full value
        return format_plain(value)


def format_plain(value: Decimal) -> str:
    """Plain text of a stored decimal, never in exponent notation."""
    return format(value, "f")
