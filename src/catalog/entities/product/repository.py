from decimal import Decimal

from loguru import logger
from sqlmodel import Session, select

from catalog.core.money import Amount, Currency
from catalog.entities.product.entity import Product
from catalog.entities.product.table import ProductTable


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> list[Product]:
        """Return every stored product in the store's natural scan order."""
        rows = self._session.exec(select(ProductTable)).all()
        return [self._to_entity(row) for row in rows]

    def create(self, product: Product) -> Product:
        """Insert a product and return it with the store-assigned id.

        The incoming ``id`` is ignored. Database errors propagate to the caller.
        """
        row = ProductTable(
            name=product.name,
            unit_price=float(product.unit_price.value),
            currency=product.unit_price.currency.symbol,
        )
        self._session.add(row)
        self._session.flush()
        logger.debug("Inserted product {} with id {}", row.name, row.id)
        return self._to_entity(row)

    @staticmethod
    def _to_entity(row: ProductTable) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            unit_price=Amount(
                currency=Currency(symbol=row.currency),
                value=Decimal(str(row.unit_price)),
            ),
        )
