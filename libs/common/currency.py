"""Money helpers for club dues.

Amounts are ``Decimal`` values in currency units (e.g. 50.00 BRL), always
quantized to cents. Float arithmetic is never used for totals.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
}


def to_money(value) -> Decimal:
    """Coerce ``value`` to a cent-quantized Decimal (round half-up)."""
    if isinstance(value, float):
        # Go through str so 0.1 stays 0.1
        value = str(value)
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    return to_money(sum(amounts, ZERO))


def format_money(amount: Decimal, currency: str = "BRL") -> str:
    """Human-readable amount, e.g. ``R$ 50.00``."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol} {to_money(amount)}"
