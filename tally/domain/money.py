"""Conversion between decimal currency values and integer cents.

This is the only place currency is converted. Stores write cents and read
Decimals; nothing in between sees a float.

Rounding is half away from zero on the scaled value (decimal.ROUND_HALF_UP),
so 1.005 becomes 101 cents and -1.005 becomes -101 cents.
"""

from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation

from tally.domain.models import Money

MINOR_UNITS_PER_MAJOR = 100

# SQLite INTEGER is a signed 64-bit value
MIN_MINOR_UNITS = -(2**63)
MAX_MINOR_UNITS = 2**63 - 1

_ONE = Decimal(1)


def _as_decimal(value: Decimal | int | str | float) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Not a currency amount: {value!r}")
    if isinstance(value, float):
        # Go through repr so 1.005 means the literal 1.005, not its binary neighbour
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a currency amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a currency amount: {value!r}")
    return result


def to_minor_units(value: Decimal | int | str | float) -> Money:
    """Convert a major-unit amount to cents.

    Args:
        value: Amount in major units (e.g. Decimal("1000.50") or "12.34").

    Returns:
        Amount in cents, rounded half away from zero.

    Raises:
        ValueError: If the value is not a finite number or doesn't fit a 64-bit INTEGER column.
    """
    try:
        scaled = _as_decimal(value) * MINOR_UNITS_PER_MAJOR
        cents = int(scaled.quantize(_ONE, rounding=ROUND_HALF_UP))
    except DecimalException as e:
        raise ValueError(f"Currency amount out of range: {value!r}") from e
    if not MIN_MINOR_UNITS <= cents <= MAX_MINOR_UNITS:
        raise ValueError(f"Currency amount out of range: {value!r}")
    return Money(cents)


def to_decimal(cents: int) -> Decimal:
    """Convert cents to an exact two-place Decimal (100050 -> 1000.50)."""
    return Decimal(int(cents)).scaleb(-2)


def to_minor_units_optional(value: Decimal | int | str | float | None) -> Money | None:
    """Like to_minor_units, passing None through."""
    if value is None:
        return None
    return to_minor_units(value)


def to_decimal_optional(cents: int | None) -> Decimal | None:
    """Like to_decimal, passing None through."""
    if cents is None:
        return None
    return to_decimal(cents)


def format_money(cents: int, symbol: str = "$") -> str:
    """Format cents for display, e.g. -25050 -> '-$250.50'."""
    amount = to_decimal(cents)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
