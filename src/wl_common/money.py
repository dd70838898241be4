"""Decimal money helpers.

Balances and amounts are ``Decimal`` with two fractional digits. No float.
"""

from decimal import ROUND_HALF_EVEN, Decimal

CENT = Decimal("0.01")


def to_amount(value: Decimal | int | str) -> Decimal:
    """Normalise to a two-decimal Decimal: '12.5' -> Decimal('12.50')."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def is_valid_amount(amount: Decimal) -> bool:
    """True for a finite, positive amount with no digits below the cent."""
    return amount.is_finite() and amount > 0 and amount.normalize().as_tuple().exponent >= -2


def format_amount(amount: Decimal) -> str:
    """Currency display string: Decimal('1234.5') -> '$1,234.50', Decimal('-3') -> '-$3.00'."""
    value = to_amount(amount)
    if value < 0:
        return f"-${-value:,.2f}"
    return f"${value:,.2f}"
