"""Pricing pipeline: base price, tax, total and discounted total.

The pipeline is a handful of pure functions invoked fresh for every request.
Tax is pluggable through ``TaxPolicy``; ``FlatTaxPolicy`` is the only policy
shipped.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.money import (
    Amount,
    Numeric,
    add,
    apply_discount,
    ensure_same_currency,
    scale,
    to_decimal,
)
from catalog.entities.product import Product

DEFAULT_FLAT_TAX_RATE = Decimal("0.2")


class PriceSpecification(BaseModel):
    """Base price and tax for one (product, quantity) pair. Never persisted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_price: Amount = Field(alias="basePrice")
    tax: Amount


@runtime_checkable
class TaxPolicy(Protocol):
    """Computes the tax owed on a product's base price."""

    def compute(self, product: Product, base_price: Amount) -> Amount: ...


class FlatTaxPolicy:
    """Fixed percentage of the base price, whatever the product."""

    def __init__(self, rate: Numeric = DEFAULT_FLAT_TAX_RATE) -> None:
        self.rate = to_decimal(rate)

    def compute(self, product: Product, base_price: Amount) -> Amount:
        return scale(self.rate, base_price)

    def __repr__(self) -> str:
        return f"FlatTaxPolicy(rate={self.rate})"


def base_price(product: Product, quantity: int) -> Amount:
    """Unit price times quantity.

    Zero and negative quantities are not rejected; they yield a zero or
    negative price.
    """
    return scale(quantity, product.unit_price)


def price_specification(
    tax_policy: TaxPolicy, product: Product, quantity: int
) -> PriceSpecification:
    base = base_price(product, quantity)
    return PriceSpecification(base_price=base, tax=tax_policy.compute(product, base))


def total_price_calculator(
    tax_policy: TaxPolicy, product: Product, quantity: int
) -> tuple[int, Amount]:
    """Return ``(quantity, base price + tax)``.

    Raises:
        CurrencyMismatchError: if the policy returned tax in another currency.
    """
    spec = price_specification(tax_policy, product, quantity)
    ensure_same_currency(spec.base_price, spec.tax)
    return quantity, add(spec.base_price, spec.tax.value)


def final_price_calculator(
    discount_percent: Numeric,
    product: Product,
    quantity: int,
    tax_policy: TaxPolicy | None = None,
) -> Amount:
    """Total price (flat tax unless another policy is given) less a discount."""
    _, total = total_price_calculator(tax_policy or FlatTaxPolicy(), product, quantity)
    return apply_discount(discount_percent, total)
