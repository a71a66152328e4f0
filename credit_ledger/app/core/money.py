"""Conversions between display amounts and stored integer cents.

Balances, amounts and fees are persisted as whole cents so that balance
arithmetic inside SQL stays exact on every backend.
"""

from __future__ import annotations

from decimal import Decimal

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("999999999999.99")


def is_whole_cents(amount: Decimal) -> bool:
    return amount == amount.quantize(CENT)


def to_cents(amount: Decimal) -> int:
    if not is_whole_cents(amount):
        raise ValueError(f"{amount} is not a whole number of cents")
    return int(amount.scaleb(2))


def from_cents(cents: int) -> Decimal:
    return Decimal(cents).scaleb(-2)
