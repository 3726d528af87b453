"""Product and pricing API endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from pydantic import ValidationError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool
from starlette.convertors import Convertor, register_url_convertor

from catalog.api.http.deps import (
    get_db_session,
    get_fixture_product,
    get_tax_policy,
)
from catalog.core.pricing import (
    TaxPolicy,
    final_price_calculator,
    total_price_calculator,
)
from catalog.entities.product import Product, ProductRepository


class SignedIntConvertor(Convertor):
    """Path convertor for integers that may carry a leading minus sign."""

    regex = "-?[0-9]+"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        return str(int(value))


class SignedDecimalConvertor(Convertor):
    """Path convertor for plain decimal numbers such as ``10``, ``12.5`` or ``-3``."""

    regex = r"-?[0-9]+(?:\.[0-9]+)?"

    def convert(self, value: str) -> Decimal:
        return Decimal(value)

    def to_string(self, value: Decimal) -> str:
        return str(value)


# Must be registered before the routes below compile their paths
register_url_convertor("signed_int", SignedIntConvertor())
register_url_convertor("signed_decimal", SignedDecimalConvertor())


router = APIRouter(tags=["products"])


@router.get("/product/{name}", response_model=Product)
def get_product(product: Product = Depends(get_fixture_product)) -> Product:
    """Return the fixture product under the requested name."""
    return product


@router.get("/totalprice/{name}/{quantity:signed_int}", response_model=Product)
def total_price(
    quantity: int,
    product: Product = Depends(get_fixture_product),
    tax_policy: TaxPolicy = Depends(get_tax_policy),
) -> Product:
    """Price ``quantity`` units of the fixture product including tax.

    The total is returned in the ``unitPrice`` slot of a product-shaped body.
    """
    _, total = total_price_calculator(tax_policy, product, quantity)
    logger.debug("Total price for {} x {}: {}", quantity, product.name, total.value)
    return Product(id=0, name=product.name, unit_price=total)


@router.get(
    "/finalprice/{name}/{quantity:signed_int}/{discount:signed_decimal}",
    response_model=Product,
)
def final_price(
    quantity: int,
    discount: Decimal,
    product: Product = Depends(get_fixture_product),
    tax_policy: TaxPolicy = Depends(get_tax_policy),
) -> Product:
    """Like ``total_price`` with ``discount`` percent taken off the total."""
    total = final_price_calculator(discount, product, quantity, tax_policy)
    return Product(id=0, name=product.name, unit_price=total)


def _insert_product(session: Session, product: Product) -> Product:
    repository = ProductRepository(session)
    created = repository.create(product)
    session.commit()
    return created


@router.post("/addProduct", response_class=PlainTextResponse)
async def add_product(
    request: Request,
    session: Session = Depends(get_db_session),
) -> PlainTextResponse:
    """Store the product in the request body.

    Only parse failures are answered with 400. The insert is committed before
    the response is built, so store errors (commit included) propagate.
    """
    body = await request.body()
    try:
        product = Product.model_validate_json(body)
    except ValidationError as e:
        logger.warning("Rejected product payload: {} error(s)", e.error_count())
        return PlainTextResponse("Invalid product data", status_code=400)

    created = await run_in_threadpool(_insert_product, session, product)
    logger.info("Product {} added with id {}", created.name, created.id)
    return PlainTextResponse("Product added")
