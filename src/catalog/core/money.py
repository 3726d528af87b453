"""Monetary amounts and the arithmetic the pricing pipeline is built from.

Every operation returns a new ``Amount``; the currency is carried through
untouched and never converted.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

Numeric = Decimal | int | float | str


class CurrencyMismatchError(ValueError):
    """Raised when two amounts in different currencies are combined."""

    def __init__(self, left: Currency, right: Currency) -> None:
        super().__init__(
            f"Cannot combine amounts in {left.symbol} and {right.symbol}"
        )
        self.left = left
        self.right = right


class Currency(BaseModel):
    """Currency identified by its symbol, e.g. ``USD``."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(description="Currency symbol")


class Amount(BaseModel):
    """A decimal value tagged with a currency."""

    model_config = ConfigDict(frozen=True)

    currency: Currency = Field(description="Currency of the amount")
    value: Decimal = Field(description="Unrounded decimal value")

    @field_serializer("value", when_used="json")
    def _serialize_value(self, value: Decimal) -> int | float:
        # Whole amounts go out as exact integers whatever their magnitude
        if value == value.to_integral_value():
            return int(value)
        return float(value)


def to_decimal(value: Numeric) -> Decimal:
    """Coerce a number to ``Decimal`` through its string form (0.2 stays 0.2)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def scale(factor: Numeric, amount: Amount) -> Amount:
    return Amount(currency=amount.currency, value=to_decimal(factor) * amount.value)


def double(amount: Amount) -> Amount:
    return scale(2, amount)


def add(amount: Amount, value: Numeric) -> Amount:
    """Add a raw number to an amount.

    The second operand is a plain value, not an ``Amount``: pass
    ``other.value`` after checking currencies with ``ensure_same_currency``.
    """
    return Amount(currency=amount.currency, value=amount.value + to_decimal(value))


def apply_discount(discount_percent: Numeric, amount: Amount) -> Amount:
    """Take ``discount_percent`` percent off the amount."""
    discount_amount = amount.value * (to_decimal(discount_percent) / Decimal(100))
    return Amount(currency=amount.currency, value=amount.value - discount_amount)


def ensure_same_currency(left: Amount, right: Amount) -> None:
    if left.currency.symbol != right.currency.symbol:
        raise CurrencyMismatchError(left.currency, right.currency)
