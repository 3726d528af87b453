"""Entities organized by business concept.

Each entity package holds its domain model (entity.py), database model
(table.py) and data access layer (repository.py).
"""

from .product import Product, ProductRepository, ProductTable

__all__ = ["Product", "ProductRepository", "ProductTable"]
