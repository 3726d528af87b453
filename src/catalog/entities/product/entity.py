"""Product domain entity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.money import Amount, Currency, Numeric, to_decimal


class Product(BaseModel):
    """A catalog product.

    ``id`` is assigned by the store; ``0`` marks a transient product that was
    never saved. JSON uses the ``unitPrice`` key.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(default=0, description="Store-assigned identifier, 0 when unsaved")
    name: str = Field(description="Product name")
    unit_price: Amount = Field(alias="unitPrice", description="Price of one unit")

    @classmethod
    def fixture(cls, name: str, unit_price: Numeric, currency: str) -> "Product":
        """Build an unsaved product with the given price, used by the demo lookups."""
        return cls(
            id=0,
            name=name,
            unit_price=Amount(
                currency=Currency(symbol=currency), value=to_decimal(unit_price)
            ),
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
