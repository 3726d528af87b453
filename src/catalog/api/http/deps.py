"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from catalog.api.http.app_data import ApplicationDependencies
from catalog.core.pricing import TaxPolicy
from catalog.entities.product import Product, ProductRepository
from catalog.runtime.config.config_data import PricingConfig


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a session that lives for one request and commits on success."""
    with app_deps.database_service.session_scope() as session:
        yield session


def get_product_repository(
    session: Session = Depends(get_db_session),
) -> ProductRepository:
    return ProductRepository(session)


def get_tax_policy(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> TaxPolicy:
    return app_deps.tax_policy


def get_pricing_config(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> PricingConfig:
    return app_deps.config.pricing


def get_fixture_product(
    name: str, pricing: PricingConfig = Depends(get_pricing_config)
) -> Product:
    """Synthesize the unsaved product the lookup endpoints price.

    The name is never looked up in the store; every name gets the configured
    fixture price.
    """
    return Product.fixture(name, pricing.fixture_unit_price, pricing.fixture_currency)
